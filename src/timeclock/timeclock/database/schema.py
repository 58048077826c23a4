"""Table definitions for the local attendance store.

Dates are stored as YYYY-MM-DD text and times as HH:MM:SS text, so string
ordering matches chronological ordering on every backend.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from ..core.constants import DEFAULT_IN_TIME

metadata = MetaData()

employees = Table(
    "employees",
    metadata,
    Column("id", String(20), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("in_time", String(5), nullable=False, server_default=DEFAULT_IN_TIME),
)

uploads = Table(
    "uploads",
    metadata,
    Column("id", String(32), primary_key=True),
    Column("filename", String(255), nullable=False),
    Column("records_inserted", Integer, nullable=False, server_default="0"),
    Column("records_skipped", Integer, nullable=False, server_default="0"),
    Column("records_empty", Integer, nullable=False, server_default="0"),
    Column("uploaded_at", String(19), nullable=False),
)

punches = Table(
    "punches",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("employee_id", String(20), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
    Column("date", String(10), nullable=False),
    Column("time", String(8), nullable=False),
    Column("source", String(20), nullable=False),
    Column("upload_id", String(32), ForeignKey("uploads.id", ondelete="CASCADE"), nullable=True),
    Column("created_at", String(19), nullable=False),
    UniqueConstraint("employee_id", "date", "time", name="uq_punches_employee_date_time"),
    Index("idx_punches_employee_date", "employee_id", "date"),
    Index("idx_punches_date", "date"),
    Index("idx_punches_upload_id", "upload_id"),
)

daily_attendance = Table(
    "daily_attendance",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("employee_id", String(20), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
    Column("date", String(10), nullable=False),
    Column("punches", Text, nullable=False),
    Column("upload_ids", Text, nullable=False),
    Column("created_at", String(19), nullable=False),
    Column("updated_at", String(19), nullable=False),
    UniqueConstraint("employee_id", "date", name="uq_daily_attendance_employee_date"),
    Index("idx_daily_attendance_date", "date"),
)
