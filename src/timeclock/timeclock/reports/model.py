from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..classification.classifier import DayResult


@dataclass(frozen=True)
class MonthlySummaryRow:
    employee_id: str
    employee_name: str
    full_day: int = 0
    half_day: int = 0
    absent: int = 0
    weekly_off: int = 0
    worked_off: int = 0

    @property
    def total_present(self) -> float:
        # Half days count as half a present day.
        return self.full_day + 0.5 * self.half_day

    def as_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "fullDay": self.full_day,
            "halfDay": self.half_day,
            "absent": self.absent,
            "weeklyOff": self.weekly_off,
            "workedOff": self.worked_off,
            "totalPresent": self.total_present,
        }


@dataclass(frozen=True)
class GridRow:
    employee_id: str
    employee_name: str
    daily_status: Dict[str, DayResult] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "dailyStatus": {day: result.as_dict() for day, result in self.daily_status.items()},
        }


@dataclass(frozen=True)
class MonthlyGrid:
    """Per-day results for every employee.

    `days_in_month` is the number of days covered: the whole month in the past,
    up to today in the current month, zero for a future month.
    """

    month: str
    days_in_month: int
    employees: List[GridRow]

    def as_dict(self) -> dict:
        return {
            "monthKey": self.month,
            "daysInMonth": self.days_in_month,
            "employees": [row.as_dict() for row in self.employees],
        }


@dataclass(frozen=True)
class DailyReportRow:
    employee_id: str
    employee_name: str
    first_in: Optional[str]
    last_out: Optional[str]
    working_minutes: float
    break_minutes: float
    punch_count: int
    status: str

    def as_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "firstIn": self.first_in,
            "lastOut": self.last_out,
            "workingMinutes": self.working_minutes,
            "breakMinutes": self.break_minutes,
            "punchCount": self.punch_count,
            "status": self.status,
        }


@dataclass(frozen=True)
class EmployeeDay:
    date: str
    punches: List[str]
    result: DayResult

    def as_dict(self) -> dict:
        data = {"date": self.date, "punches": list(self.punches)}
        data.update(self.result.as_dict())
        return data
