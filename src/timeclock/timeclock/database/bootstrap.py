from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, inspect, select

from ..punches.cache import DailyAttendanceCache
from ..punches.sql_punch_repository import SQLDailyAttendanceRepository, SQLPunchRepository
from .connection import DatabaseConnection
from .schema import daily_attendance, metadata, punches

logger = logging.getLogger(__name__)


def apply_schema(conn_factory: DatabaseConnection) -> int:
    """Create missing tables, then fill an empty cache from existing punches.

    Returns how many employee-days were rebuilt (0 when the cache was already
    populated or there are no punches).
    """

    metadata.create_all(conn_factory.engine)

    with conn_factory.transaction() as conn:
        punch_count = conn.execute(select(func.count()).select_from(punches)).scalar_one()
        cached = conn.execute(select(func.count()).select_from(daily_attendance)).scalar_one()
        if not punch_count or cached:
            return 0

        logger.info("Daily attendance cache is empty; rebuilding from %d punches", punch_count)
        cache = DailyAttendanceCache(SQLPunchRepository(conn_factory), SQLDailyAttendanceRepository(conn_factory))
        return cache.rebuild_all()


def list_tables(conn_factory: DatabaseConnection) -> List[str]:
    return sorted(inspect(conn_factory.engine).get_table_names())
