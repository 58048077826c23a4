from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import Insert
from sqlalchemy.engine import Connection, Result

from ..common.datetime_utils import now_local
from .connection import DatabaseConnection


@contextmanager
def db_session(conn_factory: DatabaseConnection) -> Iterator[Connection]:
    with conn_factory.transaction() as conn:
        yield conn


def fetchone(result: Result) -> Optional[Dict[str, Any]]:
    row = result.mappings().first()
    return dict(row) if row else None


def fetchall(result: Result) -> List[Dict[str, Any]]:
    return [dict(r) for r in result.mappings().all()]


def insert_ignore(stmt: Insert) -> Insert:
    """Skip rows that would violate a unique key instead of raising."""
    return stmt.prefix_with("OR IGNORE", dialect="sqlite").prefix_with("IGNORE", dialect="mysql")


def timestamp_now() -> str:
    return now_local().strftime("%Y-%m-%d %H:%M:%S")
