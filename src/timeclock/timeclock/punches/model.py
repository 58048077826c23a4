from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from ..core.constants import PUNCH_LIST_SEPARATOR, UPLOAD_ID_SEPARATOR
from ..core.enums import PunchSource

DayKey = Tuple[str, str]
"""(employee_id, YYYY-MM-DD)"""


@dataclass(frozen=True)
class Punch:
    """Raw fact: one clock event. Immutable once stored."""

    employee_id: str
    date: str
    time: str
    source: PunchSource
    upload_id: Optional[str] = None


@dataclass(frozen=True)
class DailyAttendance:
    """Cached view of all punches for one employee-day.

    Always rebuilt from the punches table, never patched in place.
    """

    employee_id: str
    date: str
    punches: Tuple[str, ...]
    upload_ids: FrozenSet[str]
    updated_at: str

    @property
    def key(self) -> DayKey:
        return (self.employee_id, self.date)


def join_punches(times: Iterable[str]) -> str:
    return PUNCH_LIST_SEPARATOR.join(sorted(set(times)))


def split_punches(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return sorted(t.strip() for t in text.split(",") if t.strip())


def join_upload_ids(upload_ids: Iterable[Optional[str]]) -> str:
    return UPLOAD_ID_SEPARATOR.join(sorted({u for u in upload_ids if u}))


def split_upload_ids(text: Optional[str]) -> FrozenSet[str]:
    if not text:
        return frozenset()
    return frozenset(u.strip() for u in text.split(UPLOAD_ID_SEPARATOR) if u.strip())
