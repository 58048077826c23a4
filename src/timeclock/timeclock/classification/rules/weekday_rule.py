from __future__ import annotations

from ...core.constants import FULL_DAY_MINUTES, HALF_DAY_MINUTES
from ...core.enums import DayStatus
from .base import DayRule


class WeekdayRule(DayRule):
    """Monday to Saturday. Exactly 480/300 minutes count for the higher tier."""

    def decide(self, *, worked_minutes: float) -> DayStatus:
        if worked_minutes >= FULL_DAY_MINUTES:
            return DayStatus.FULL_DAY
        if worked_minutes >= HALF_DAY_MINUTES:
            return DayStatus.HALF_DAY
        return DayStatus.ABSENT

    def decide_empty(self) -> DayStatus:
        return DayStatus.ABSENT


class FutureWeekdayRule(WeekdayRule):
    """A weekday after today: nothing recorded yet is not an absence."""

    def decide_empty(self) -> DayStatus:
        return DayStatus.PENDING
