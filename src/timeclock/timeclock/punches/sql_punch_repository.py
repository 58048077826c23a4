from __future__ import annotations

from typing import List, Optional, Sequence

from sqlalchemy import delete, func, insert, select, update

from ..core.enums import PunchSource
from ..database.base import db_session, fetchall, fetchone, insert_ignore, timestamp_now
from ..database.connection import DatabaseConnection
from ..database.schema import daily_attendance, punches
from .model import DailyAttendance, DayKey, Punch, split_punches, split_upload_ids
from .repository import DailyAttendanceRepository, PunchRepository


def _to_punch(r: dict) -> Punch:
    return Punch(
        employee_id=r["employee_id"],
        date=r["date"],
        time=r["time"],
        source=PunchSource(r["source"]),
        upload_id=r.get("upload_id"),
    )


class SQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append_punch(
        self,
        *,
        employee_id: str,
        date: str,
        time: str,
        source: PunchSource,
        upload_id: Optional[str] = None,
    ) -> bool:
        stmt = insert_ignore(
            insert(punches).values(
                employee_id=employee_id,
                date=date,
                time=time,
                source=source.value,
                upload_id=upload_id,
                created_at=timestamp_now(),
            )
        )
        with db_session(self._conn_factory) as conn:
            return conn.execute(stmt).rowcount > 0

    def punches_for_day(self, employee_id: str, date: str) -> List[str]:
        return [p.time for p in self.punch_rows_for_day(employee_id, date)]

    def punch_rows_for_day(self, employee_id: str, date: str) -> Sequence[Punch]:
        with db_session(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(
                    select(punches)
                    .where(punches.c.employee_id == employee_id, punches.c.date == date)
                    .order_by(punches.c.time)
                )
            )
        return [_to_punch(r) for r in rows]

    def punches_in_range(self, employee_id: str, start: str, end: str) -> Sequence[Punch]:
        with db_session(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(
                    select(punches)
                    .where(punches.c.employee_id == employee_id, punches.c.date.between(start, end))
                    .order_by(punches.c.date, punches.c.time)
                )
            )
        return [_to_punch(r) for r in rows]

    def days_for_upload(self, upload_id: str) -> List[DayKey]:
        with db_session(self._conn_factory) as conn:
            rows = conn.execute(
                select(punches.c.employee_id, punches.c.date)
                .where(punches.c.upload_id == upload_id)
                .distinct()
                .order_by(punches.c.employee_id, punches.c.date)
            ).all()
        return [(r.employee_id, r.date) for r in rows]

    def count_for_upload(self, upload_id: str) -> int:
        with db_session(self._conn_factory) as conn:
            return int(
                conn.execute(select(func.count()).select_from(punches).where(punches.c.upload_id == upload_id)).scalar_one()
            )

    def delete_by_upload(self, upload_id: str) -> List[DayKey]:
        with db_session(self._conn_factory) as conn:
            days = self.days_for_upload(upload_id)
            conn.execute(delete(punches).where(punches.c.upload_id == upload_id))
            return days

    def all_days(self) -> List[DayKey]:
        with db_session(self._conn_factory) as conn:
            rows = conn.execute(
                select(punches.c.employee_id, punches.c.date)
                .distinct()
                .order_by(punches.c.employee_id, punches.c.date)
            ).all()
        return [(r.employee_id, r.date) for r in rows]


def _to_daily(r: dict) -> DailyAttendance:
    return DailyAttendance(
        employee_id=r["employee_id"],
        date=r["date"],
        punches=tuple(split_punches(r["punches"])),
        upload_ids=split_upload_ids(r["upload_ids"]),
        updated_at=r["updated_at"],
    )


class SQLDailyAttendanceRepository(DailyAttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: str, date: str) -> Optional[DailyAttendance]:
        with db_session(self._conn_factory) as conn:
            r = fetchone(
                conn.execute(
                    select(daily_attendance).where(
                        daily_attendance.c.employee_id == employee_id,
                        daily_attendance.c.date == date,
                    )
                )
            )
        return _to_daily(r) if r else None

    def upsert(self, *, employee_id: str, date: str, punches: str, upload_ids: str) -> None:
        now = timestamp_now()
        match = (daily_attendance.c.employee_id == employee_id, daily_attendance.c.date == date)
        with db_session(self._conn_factory) as conn:
            existing = conn.execute(select(daily_attendance.c.id).where(*match)).first()
            if existing:
                conn.execute(
                    update(daily_attendance)
                    .where(*match)
                    .values(punches=punches, upload_ids=upload_ids, updated_at=now)
                )
            else:
                conn.execute(
                    insert(daily_attendance).values(
                        employee_id=employee_id,
                        date=date,
                        punches=punches,
                        upload_ids=upload_ids,
                        created_at=now,
                        updated_at=now,
                    )
                )

    def delete(self, employee_id: str, date: str) -> bool:
        with db_session(self._conn_factory) as conn:
            result = conn.execute(
                delete(daily_attendance).where(
                    daily_attendance.c.employee_id == employee_id,
                    daily_attendance.c.date == date,
                )
            )
            return result.rowcount > 0

    def list_between(self, start: str, end: str, *, employee_id: Optional[str] = None) -> Sequence[DailyAttendance]:
        stmt = select(daily_attendance).where(daily_attendance.c.date.between(start, end))
        if employee_id is not None:
            stmt = stmt.where(daily_attendance.c.employee_id == employee_id)
        with db_session(self._conn_factory) as conn:
            rows = fetchall(conn.execute(stmt.order_by(daily_attendance.c.employee_id, daily_attendance.c.date)))
        return [_to_daily(r) for r in rows]

    def list_tagged_with_upload(self, upload_id: str) -> Sequence[DailyAttendance]:
        with db_session(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(select(daily_attendance).where(daily_attendance.c.upload_ids.contains(upload_id)))
            )
        # LIKE may match a longer id; keep exact members only.
        return [d for d in (_to_daily(r) for r in rows) if upload_id in d.upload_ids]

    def set_upload_ids(self, employee_id: str, date: str, upload_ids: str) -> bool:
        with db_session(self._conn_factory) as conn:
            result = conn.execute(
                update(daily_attendance)
                .where(daily_attendance.c.employee_id == employee_id, daily_attendance.c.date == date)
                .values(upload_ids=upload_ids, updated_at=timestamp_now())
            )
            return result.rowcount > 0

    def count(self) -> int:
        with db_session(self._conn_factory) as conn:
            return int(conn.execute(select(func.count()).select_from(daily_attendance)).scalar_one())
