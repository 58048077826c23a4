from __future__ import annotations

import logging
from typing import Iterable, Optional

from .model import DailyAttendance, DayKey, join_punches, join_upload_ids
from .repository import DailyAttendanceRepository, PunchRepository

logger = logging.getLogger(__name__)


class DailyAttendanceCache:
    """Keeps daily_attendance in step with the punches table.

    Every rebuild re-reads all punches stored for the day (not only the ones
    that just changed); callers run it inside the same transaction as the
    punch writes or deletes.
    """

    def __init__(self, punches: PunchRepository, daily: DailyAttendanceRepository):
        self._punches = punches
        self._daily = daily

    def rebuild_day(self, employee_id: str, date: str) -> Optional[DailyAttendance]:
        rows = self._punches.punch_rows_for_day(employee_id, date)
        if not rows:
            self._daily.delete(employee_id, date)
            return None

        self._daily.upsert(
            employee_id=employee_id,
            date=date,
            punches=join_punches(p.time for p in rows),
            upload_ids=join_upload_ids(p.upload_id for p in rows),
        )
        return self._daily.get(employee_id, date)

    def rebuild(self, days: Iterable[DayKey]) -> int:
        """Rebuild each distinct employee-day once. Returns how many were processed."""
        count = 0
        for employee_id, date in sorted(set(days)):
            self.rebuild_day(employee_id, date)
            count += 1
        return count

    def rebuild_all(self) -> int:
        count = self.rebuild(self._punches.all_days())
        logger.info("Rebuilt daily attendance cache for %d employee-days", count)
        return count

    def strip_upload_tag(self, upload_id: str, *, skip: Iterable[DayKey] = ()) -> int:
        """Legacy path for rows built before punches carried an upload id.

        Only the contributing-upload set is edited; the cached punches stay as
        they are, since there is no punch-level record to delete.
        """

        skipped = set(skip)
        stripped = 0
        for row in self._daily.list_tagged_with_upload(upload_id):
            if row.key in skipped:
                continue
            remaining = join_upload_ids(u for u in row.upload_ids if u != upload_id)
            if self._daily.set_upload_ids(row.employee_id, row.date, remaining):
                stripped += 1
        if stripped:
            logger.warning("Removed upload %s from %d legacy cache rows without punch tags", upload_id, stripped)
        return stripped
