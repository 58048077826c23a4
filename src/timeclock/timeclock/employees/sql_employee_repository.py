from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import insert, select, update

from ..database.base import db_session, fetchall, fetchone, insert_ignore
from ..database.connection import DatabaseConnection
from ..database.schema import employees
from .model import Employee
from .repository import EmployeeRepository


def _to_employee(r: dict) -> Employee:
    return Employee(employee_id=r["id"], name=r["name"], in_time=r["in_time"])


class SQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_session(self._conn_factory) as conn:
            r = fetchone(conn.execute(select(employees).where(employees.c.id == employee_id)))
            return _to_employee(r) if r else None

    def ensure_exists(self, employee_id: str, name: str) -> bool:
        with db_session(self._conn_factory) as conn:
            result = conn.execute(insert_ignore(insert(employees).values(id=employee_id, name=name)))
            return result.rowcount > 0

    def list_all(self) -> Sequence[Employee]:
        with db_session(self._conn_factory) as conn:
            rows = fetchall(conn.execute(select(employees)))
        return sorted((_to_employee(r) for r in rows), key=lambda e: e.sort_key)

    def update(self, employee_id: str, *, name: str, in_time: Optional[str] = None) -> bool:
        values = {"name": name}
        if in_time is not None:
            values["in_time"] = in_time
        with db_session(self._conn_factory) as conn:
            result = conn.execute(update(employees).where(employees.c.id == employee_id).values(**values))
            return result.rowcount > 0
