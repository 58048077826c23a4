from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from ..core.enums import PunchSource
from .model import DailyAttendance, DayKey, Punch


class PunchRepository(Protocol):
    """Raw punch storage. The source of truth for every derived view."""

    def append_punch(
        self,
        *,
        employee_id: str,
        date: str,
        time: str,
        source: PunchSource,
        upload_id: Optional[str] = None,
    ) -> bool:
        """Store one punch. False when (employee_id, date, time) already exists."""

        raise NotImplementedError

    def punches_for_day(self, employee_id: str, date: str) -> List[str]:
        raise NotImplementedError

    def punch_rows_for_day(self, employee_id: str, date: str) -> Sequence[Punch]:
        raise NotImplementedError

    def punches_in_range(self, employee_id: str, start: str, end: str) -> Sequence[Punch]:
        raise NotImplementedError

    def days_for_upload(self, upload_id: str) -> List[DayKey]:
        raise NotImplementedError

    def count_for_upload(self, upload_id: str) -> int:
        raise NotImplementedError

    def delete_by_upload(self, upload_id: str) -> List[DayKey]:
        """Remove every punch tagged with upload_id; returns the employee-days touched."""

        raise NotImplementedError

    def all_days(self) -> List[DayKey]:
        raise NotImplementedError


class DailyAttendanceRepository(Protocol):
    """Derived cache: one row per employee-day that has at least one punch."""

    def get(self, employee_id: str, date: str) -> Optional[DailyAttendance]:
        raise NotImplementedError

    def upsert(self, *, employee_id: str, date: str, punches: str, upload_ids: str) -> None:
        raise NotImplementedError

    def delete(self, employee_id: str, date: str) -> bool:
        raise NotImplementedError

    def list_between(self, start: str, end: str, *, employee_id: Optional[str] = None) -> Sequence[DailyAttendance]:
        raise NotImplementedError

    def list_tagged_with_upload(self, upload_id: str) -> Sequence[DailyAttendance]:
        raise NotImplementedError

    def set_upload_ids(self, employee_id: str, date: str, upload_ids: str) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
