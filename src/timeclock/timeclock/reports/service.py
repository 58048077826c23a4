from __future__ import annotations

import logging
from collections import Counter
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..classification.classifier import break_minutes, classify_day, working_minutes
from ..common.datetime_utils import iter_days, month_bounds, parse_iso_date, today_local
from ..common.validators import validate_employee_id
from ..core.enums import DayStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..punches.model import Punch
from ..punches.repository import DailyAttendanceRepository, PunchRepository
from .model import DailyReportRow, EmployeeDay, GridRow, MonthlyGrid, MonthlySummaryRow

logger = logging.getLogger(__name__)

_PunchIndex = Dict[Tuple[str, str], Tuple[str, ...]]


class ReportService:
    """Replays the day classifier over cached punches.

    Counts cannot come from a plain GROUP BY: Sunday and weekday days follow
    different rules, and days without punches still count.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        punches: PunchRepository,
        daily: DailyAttendanceRepository,
    ):
        self._employees = employees
        self._punches = punches
        self._daily = daily

    def _covered_days(self, month: str, today: date) -> List[date]:
        first, last = month_bounds(month)
        return list(iter_days(first, min(last, today)))

    def _punch_index(self, first: date, last: date, *, employee_id: Optional[str] = None) -> _PunchIndex:
        rows = self._daily.list_between(first.isoformat(), last.isoformat(), employee_id=employee_id)
        return {row.key: row.punches for row in rows}

    def monthly_summary(self, month: str, *, today: Optional[date] = None) -> List[MonthlySummaryRow]:
        today = today or today_local()
        days = self._covered_days(month, today)
        first, last = month_bounds(month)
        index = self._punch_index(first, last) if days else {}

        out: List[MonthlySummaryRow] = []
        for employee in self._employees.list_all():
            counts = Counter(
                classify_day(index.get((employee.employee_id, d.isoformat()), ()), d, today=today).status for d in days
            )
            out.append(
                MonthlySummaryRow(
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    full_day=counts[DayStatus.FULL_DAY],
                    half_day=counts[DayStatus.HALF_DAY],
                    absent=counts[DayStatus.ABSENT],
                    weekly_off=counts[DayStatus.WEEKLY_OFF],
                    worked_off=counts[DayStatus.WORKED_OFF],
                )
            )

        logger.info("Monthly summary for %s: %d employees, %d days", month, len(out), len(days))
        return out

    def monthly_grid(self, month: str, *, today: Optional[date] = None) -> MonthlyGrid:
        today = today or today_local()
        days = self._covered_days(month, today)
        first, last = month_bounds(month)
        index = self._punch_index(first, last) if days else {}

        rows = []
        for employee in self._employees.list_all():
            daily_status = {}
            for d in days:
                key = d.isoformat()
                daily_status[key] = classify_day(index.get((employee.employee_id, key), ()), d, today=today)
            rows.append(GridRow(employee_id=employee.employee_id, employee_name=employee.name, daily_status=daily_status))

        logger.info("Monthly grid for %s: %d employees, %d days", month, len(rows), len(days))
        return MonthlyGrid(month=month, days_in_month=len(days), employees=rows)

    def daily_report(self, day: str, *, today: Optional[date] = None) -> List[DailyReportRow]:
        """Every employee on one date, with break and working minutes.

        Note: status comes from first-in/last-out; breaks never change it.
        """

        target = parse_iso_date(day)
        key = target.isoformat()
        index = self._punch_index(target, target)

        out = []
        for employee in self._employees.list_all():
            punches = index.get((employee.employee_id, key), ())
            result = classify_day(punches, target, today=today)
            out.append(
                DailyReportRow(
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    first_in=result.first_in,
                    last_out=result.last_out,
                    working_minutes=working_minutes(punches),
                    break_minutes=break_minutes(punches),
                    punch_count=len(punches),
                    status=result.status.value,
                )
            )
        return out

    def employee_month(self, employee_id: str, month: str, *, today: Optional[date] = None) -> List[EmployeeDay]:
        """Every calendar day of the month for one employee, future days included."""
        employee_id = self._require_employee(employee_id)
        today = today or today_local()
        first, last = month_bounds(month)
        index = self._punch_index(first, last, employee_id=employee_id)

        out = []
        for d in iter_days(first, last):
            punches = index.get((employee_id, d.isoformat()), ())
            out.append(EmployeeDay(date=d.isoformat(), punches=list(punches), result=classify_day(punches, d, today=today)))
        return out

    def employee_logs(
        self,
        employee_id: str,
        *,
        day: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Sequence[Punch]:
        """Raw punches with their source, for one date or a date range (both ends inclusive)."""
        employee_id = self._require_employee(employee_id)
        if day:
            start = end = parse_iso_date(day).isoformat()
        else:
            if not start or not end:
                raise ValidationError("Either date or both start and end are required")
            start = parse_iso_date(start).isoformat()
            end = parse_iso_date(end).isoformat()
            if start > end:
                raise ValidationError("start must not be after end")
        return self._punches.punches_in_range(employee_id, start, end)

    def _require_employee(self, employee_id: str) -> str:
        employee_id = validate_employee_id(employee_id)
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee_id
