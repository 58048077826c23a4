from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.enums import ProgressPhase

logger = logging.getLogger(__name__)

_PHASE_ORDER = {
    ProgressPhase.READING: 0,
    ProgressPhase.PARSING: 1,
    ProgressPhase.INSERTING: 2,
    ProgressPhase.COMPLETE: 3,
    ProgressPhase.ERROR: 3,
}
_TERMINAL = {ProgressPhase.COMPLETE, ProgressPhase.ERROR}


@dataclass(frozen=True)
class ProgressEvent:
    phase: ProgressPhase
    percent: int
    message: str
    current: int = 0
    total: int = 0

    def as_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "percent": self.percent,
            "message": self.message,
            "current": self.current,
            "total": self.total,
        }


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    """Forwards progress events to an optional callback.

    Guarantees to the callback:
    - phases arrive as reading -> parsing -> inserting -> complete; a phase can be
      skipped but never revisited
    - percent never decreases and stays within 0..100
    - complete and error are terminal; nothing is emitted after them

    Note: callers may report from inside an open transaction; the callback must
    not touch the store.
    """

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self._callback = callback
        self._phase: Optional[ProgressPhase] = None
        self._percent = 0

    @property
    def finished(self) -> bool:
        return self._phase in _TERMINAL

    @property
    def percent(self) -> int:
        return self._percent

    def report(self, phase: ProgressPhase, percent: float, message: str, *, current: int = 0, total: int = 0) -> None:
        if self.finished:
            raise RuntimeError(f"Progress already finished with {self._phase.value}")
        if phase == ProgressPhase.ERROR:
            raise ValueError("Use fail() to report an error")
        if self._phase is not None and _PHASE_ORDER[phase] < _PHASE_ORDER[self._phase]:
            raise ValueError(f"Phase {phase.value} cannot follow {self._phase.value}")

        self._percent = max(self._percent, min(100, max(0, int(round(percent)))))
        if phase == ProgressPhase.COMPLETE:
            self._percent = 100
        self._phase = phase
        self._emit(ProgressEvent(phase, self._percent, message, int(current), int(total)))

    def complete(self, message: str, *, current: int = 0, total: int = 0) -> None:
        self.report(ProgressPhase.COMPLETE, 100, message, current=current, total=total)

    def fail(self, message: str) -> None:
        """Emit the terminal error event, keeping the last percent. No-op once finished.

        A callback that raises here is only logged; the caller raises its own error.
        """
        if self.finished:
            return
        self._phase = ProgressPhase.ERROR
        try:
            self._emit(ProgressEvent(ProgressPhase.ERROR, self._percent, message))
        except Exception:
            logger.exception("Progress callback failed while reporting an error")

    def _emit(self, event: ProgressEvent) -> None:
        logger.debug("progress %s %d%% %s", event.phase.value, event.percent, event.message)
        if self._callback is not None:
            self._callback(event)
