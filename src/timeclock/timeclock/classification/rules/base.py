from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import DayStatus


class DayRule(ABC):
    """Strategy Pattern: encapsulate how one kind of calendar day is classified."""

    @abstractmethod
    def decide(self, *, worked_minutes: float) -> DayStatus:
        """Status for a day with a positive first-in to last-out span."""

        raise NotImplementedError

    @abstractmethod
    def decide_empty(self) -> DayStatus:
        """Status for a day without usable punches (none, or zero/negative span)."""

        raise NotImplementedError
