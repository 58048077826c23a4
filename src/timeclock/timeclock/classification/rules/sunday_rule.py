from __future__ import annotations

from ...core.constants import WORKED_OFF_MINUTES
from ...core.enums import DayStatus
from .base import DayRule


class SundayRule(DayRule):
    """Weekly off day; enough work turns it into a worked-off day."""

    def decide(self, *, worked_minutes: float) -> DayStatus:
        if worked_minutes >= WORKED_OFF_MINUTES:
            return DayStatus.WORKED_OFF
        return DayStatus.WEEKLY_OFF

    def decide_empty(self) -> DayStatus:
        return DayStatus.WEEKLY_OFF
