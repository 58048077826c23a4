"""Day classification: a day's punches plus its calendar date give a status.

Only the first-in and last-out punches decide the status. Intermediate punches
feed the break figure shown in daily detail, which never changes the status.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import is_sunday, time_to_minutes, today_local
from ..core.enums import DayStatus
from .factory import DayRuleFactory

_factory = DayRuleFactory()


@dataclass(frozen=True)
class DayResult:
    status: DayStatus
    first_in: Optional[str] = None
    last_out: Optional[str] = None
    worked_minutes: float = 0

    def as_dict(self) -> dict:
        return {
            "status": self.status.value,
            "firstIn": self.first_in,
            "lastOut": self.last_out,
            "workedMinutes": self.worked_minutes,
        }


def _minutes(value: str) -> float:
    minutes = time_to_minutes(value)
    if minutes is None:
        raise ValueError(f"Not a canonical time: {value!r}")
    return minutes


def classify_day(punches: Sequence[str], day: date, *, today: Optional[date] = None) -> DayResult:
    """Classify one employee-day from canonical HH:MM:SS punch times.

    Note: `today` only matters for weekdays without punches (Pending vs Absent).
    """

    rule = _factory.for_date(day, today=today or today_local())
    if not punches:
        return DayResult(status=rule.decide_empty())

    # Canonical HH:MM:SS strings sort chronologically.
    first_in = min(punches)
    last_out = max(punches)
    worked = _minutes(last_out) - _minutes(first_in)

    if worked <= 0:
        # Single punch or out-before-in: nothing worked, even on a future day.
        status = DayStatus.WEEKLY_OFF if is_sunday(day) else DayStatus.ABSENT
        return DayResult(status=status, first_in=first_in, last_out=last_out, worked_minutes=0)

    return DayResult(
        status=rule.decide(worked_minutes=worked),
        first_in=first_in,
        last_out=last_out,
        worked_minutes=worked,
    )


def break_minutes(punches: Sequence[str]) -> float:
    """Sum of gaps between punch pairs (1,2), (3,4), ... in chronological order.

    Punches are assumed to alternate IN/OUT; this is not validated, so an odd
    count or two consecutive INs pair the wrong indices.
    """

    ordered = sorted(punches)
    total = 0.0
    for i in range(1, len(ordered) - 1, 2):
        gap = _minutes(ordered[i + 1]) - _minutes(ordered[i])
        if gap > 0:
            total += gap
    return total


def working_minutes(punches: Sequence[str]) -> float:
    """First-in to last-out span minus breaks."""
    if not punches:
        return 0
    ordered = sorted(punches)
    span = _minutes(ordered[-1]) - _minutes(ordered[0])
    if span <= 0:
        return 0
    return span - break_minutes(ordered)
