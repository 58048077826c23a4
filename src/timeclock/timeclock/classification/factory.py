from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import is_sunday
from .rules.base import DayRule
from .rules.sunday_rule import SundayRule
from .rules.weekday_rule import FutureWeekdayRule, WeekdayRule


@dataclass
class DayRuleFactory:
    """Factory Pattern: choose the rule for a calendar day."""

    def for_date(self, day: date, *, today: date) -> DayRule:
        if is_sunday(day):
            return SundayRule()
        if day > today:
            return FutureWeekdayRule()
        return WeekdayRule()
