from __future__ import annotations

from enum import Enum


class DayStatus(str, Enum):
    """Attendance status derived for one employee-day."""

    FULL_DAY = "FullDay"
    HALF_DAY = "HalfDay"
    ABSENT = "Absent"
    WEEKLY_OFF = "WeeklyOff"
    WORKED_OFF = "WorkedOff"
    PENDING = "Pending"

    @property
    def short_code(self) -> str:
        """Abbreviation used in calendar grids."""
        return _SHORT_CODES[self]


_SHORT_CODES = {
    DayStatus.FULL_DAY: "P",
    DayStatus.HALF_DAY: "HD",
    DayStatus.ABSENT: "A",
    DayStatus.WEEKLY_OFF: "WO",
    DayStatus.WORKED_OFF: "WW",
    DayStatus.PENDING: "-",
}


class PunchSource(str, Enum):
    """Where a raw punch came from."""

    BIOMETRIC = "biometric"
    MANUAL_UPLOAD = "manual-upload"


class ProgressPhase(str, Enum):
    """Ingestion phases, in the order they may be reported."""

    READING = "reading"
    PARSING = "parsing"
    INSERTING = "inserting"
    COMPLETE = "complete"
    ERROR = "error"
