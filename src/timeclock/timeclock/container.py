from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_MAX_UPLOAD_MB
from .database.connection import DBConfig, DatabaseConnection
from .employees.service import EmployeeService
from .employees.sql_employee_repository import SQLEmployeeRepository
from .ingestion.service import IngestionService
from .punches.cache import DailyAttendanceCache
from .punches.sql_punch_repository import SQLDailyAttendanceRepository, SQLPunchRepository
from .reports.service import ReportService
from .uploads.service import UploadService
from .uploads.sql_upload_repository import SQLUploadRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: SQLEmployeeRepository
    punches_repo: SQLPunchRepository
    daily_repo: SQLDailyAttendanceRepository
    uploads_repo: SQLUploadRepository
    cache: DailyAttendanceCache

    employee_service: EmployeeService
    ingestion_service: IngestionService
    upload_service: UploadService
    report_service: ReportService


def build_container(
    *,
    database_url: str,
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024,
    echo: bool = False,
) -> Container:
    conn = DatabaseConnection(DBConfig(url=database_url, echo=echo))

    employees_repo = SQLEmployeeRepository(conn)
    punches_repo = SQLPunchRepository(conn)
    daily_repo = SQLDailyAttendanceRepository(conn)
    uploads_repo = SQLUploadRepository(conn)
    cache = DailyAttendanceCache(punches_repo, daily_repo)

    employee_service = EmployeeService(employees_repo)
    ingestion_service = IngestionService(
        conn,
        employees_repo,
        punches_repo,
        cache,
        uploads_repo,
        max_upload_bytes=max_upload_bytes,
    )
    upload_service = UploadService(conn, uploads_repo, punches_repo, cache)
    report_service = ReportService(employees_repo, punches_repo, daily_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        punches_repo=punches_repo,
        daily_repo=daily_repo,
        uploads_repo=uploads_repo,
        cache=cache,
        employee_service=employee_service,
        ingestion_service=ingestion_service,
        upload_service=upload_service,
        report_service=report_service,
    )
