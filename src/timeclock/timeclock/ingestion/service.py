from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Mapping, Optional, Sequence, Set, Union

from sqlalchemy.exc import SQLAlchemyError

from ..common.datetime_utils import normalize_date
from ..common.validators import (
    sanitize_filename,
    validate_employee_id,
    validate_employee_name,
    validate_file_extension,
    validate_file_size,
)
from ..core.constants import DEFAULT_MAX_UPLOAD_MB, PROGRESS_REPORTS_PER_BATCH
from ..core.enums import ProgressPhase, PunchSource
from ..core.exceptions import IngestionError, ValidationError
from ..database.base import timestamp_now
from ..database.connection import DatabaseConnection
from ..employees.model import default_employee_name
from ..employees.repository import EmployeeRepository
from ..punches.cache import DailyAttendanceCache
from ..punches.model import DayKey
from ..punches.repository import PunchRepository
from ..uploads.model import UploadResult
from ..uploads.repository import UploadRepository
from .columns import DATE_ALIASES, EMPLOYEE_ID_ALIASES, NAME_ALIASES, PUNCH_ALIASES, pick
from .progress import ProgressCallback, ProgressReporter
from .tabular import read_rows
from .tokenizer import normalize_punch_cell

logger = logging.getLogger(__name__)

_INSERTED = "inserted"
_SKIPPED = "skipped"
_EMPTY = "empty"

# Percent bands per phase; inserting covers row processing and the cache rebuild.
_PARSED_PERCENT = 10
_ROWS_DONE_PERCENT = 90


class IngestionService:
    """Writes uploaded punch rows and keeps the daily cache in step.

    One upload is one transaction: punches, auto-provisioned employees, the
    upload row and the rebuilt cache rows commit together or not at all.
    """

    def __init__(
        self,
        db: DatabaseConnection,
        employees: EmployeeRepository,
        punches: PunchRepository,
        cache: DailyAttendanceCache,
        uploads: UploadRepository,
        *,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024,
    ):
        self._db = db
        self._employees = employees
        self._punches = punches
        self._cache = cache
        self._uploads = uploads
        self._max_upload_bytes = int(max_upload_bytes)

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    def ingest_file(self, path: Union[str, Path], on_progress: Optional[ProgressCallback] = None) -> UploadResult:
        path = Path(path)
        reporter = ProgressReporter(on_progress)
        reporter.report(ProgressPhase.READING, 0, f"Reading {path.name}...")

        try:
            size = path.stat().st_size
        except OSError as exc:
            self._abort(reporter, f"Could not read {path.name}: {exc.strerror or exc}", exc)

        filename = self._check_file(reporter, path.name, size)
        rows = self._read(reporter, path, filename)
        return self._ingest(rows, filename, reporter)

    def ingest_bytes(
        self,
        data: bytes,
        filename: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadResult:
        reporter = ProgressReporter(on_progress)
        reporter.report(ProgressPhase.READING, 0, f"Reading {filename}...")

        filename = self._check_file(reporter, filename, len(data))
        rows = self._read(reporter, data, filename)
        return self._ingest(rows, filename, reporter)

    def ingest_rows(
        self,
        rows: Sequence[Mapping[str, object]],
        filename: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UploadResult:
        """Ingest rows that were already parsed by the caller."""
        return self._ingest(rows, filename, ProgressReporter(on_progress))

    def _check_file(self, reporter: ProgressReporter, filename: str, size: int) -> str:
        try:
            validate_file_size(size, self._max_upload_bytes)
        except ValidationError as exc:
            self._abort(reporter, str(exc), exc, too_large=True)

        try:
            name = sanitize_filename(filename)
            validate_file_extension(name)
        except ValidationError as exc:
            self._abort(reporter, str(exc), exc)
        return name

    def _read(self, reporter: ProgressReporter, source: Union[Path, bytes], filename: str):
        try:
            return read_rows(source, filename)
        except IngestionError as exc:
            self._abort(reporter, str(exc), exc)

    def _abort(
        self,
        reporter: ProgressReporter,
        message: str,
        cause: Exception,
        *,
        too_large: bool = False,
        unexpected: bool = False,
    ) -> None:
        logger.error("Upload failed: %s", message, exc_info=cause if unexpected else None)
        reporter.fail(message)
        raise IngestionError(message, too_large=too_large) from cause

    def _ingest(
        self,
        rows: Sequence[Mapping[str, object]],
        filename: str,
        reporter: ProgressReporter,
    ) -> UploadResult:
        total = len(rows)
        upload_id = uuid.uuid4().hex
        logger.info("Ingesting %s: %d rows (upload %s)", filename, total, upload_id)

        counts = {_INSERTED: 0, _SKIPPED: 0, _EMPTY: 0}
        touched: Set[DayKey] = set()
        step = max(1, total // PROGRESS_REPORTS_PER_BATCH)

        try:
            reporter.report(ProgressPhase.PARSING, _PARSED_PERCENT, f"Found {total} records", current=0, total=total)
            with self._db.transaction():
                self._uploads.create(upload_id=upload_id, filename=filename, uploaded_at=timestamp_now())

                for index, row in enumerate(rows, start=1):
                    counts[self._ingest_row(index, row, upload_id, touched)] += 1
                    if index % step == 0 or index == total:
                        percent = _PARSED_PERCENT + (_ROWS_DONE_PERCENT - _PARSED_PERCENT) * index / total
                        reporter.report(
                            ProgressPhase.INSERTING,
                            percent,
                            "Inserting records...",
                            current=index,
                            total=total,
                        )

                if touched:
                    reporter.report(
                        ProgressPhase.INSERTING,
                        _ROWS_DONE_PERCENT,
                        f"Rebuilding {len(touched)} attendance days...",
                        current=total,
                        total=total,
                    )
                affected = self._cache.rebuild(touched)

                self._uploads.update_counters(
                    upload_id,
                    inserted=counts[_INSERTED],
                    skipped=counts[_SKIPPED],
                    empty=counts[_EMPTY],
                )
        except SQLAlchemyError as exc:
            self._abort(reporter, f"Could not save {filename}: storage error", exc)
        except Exception as exc:
            # Row handling or the progress callback failed; the transaction is rolled back.
            self._abort(reporter, f"Could not save {filename}: {type(exc).__name__}: {exc}", exc, unexpected=True)

        logger.info(
            "Upload %s complete: inserted=%d skipped=%d empty=%d days=%d",
            upload_id,
            counts[_INSERTED],
            counts[_SKIPPED],
            counts[_EMPTY],
            affected,
        )
        reporter.complete(f"Complete: {counts[_INSERTED]} inserted", current=total, total=total)

        return UploadResult(
            upload_id=upload_id,
            filename=filename,
            inserted=counts[_INSERTED],
            skipped=counts[_SKIPPED],
            empty=counts[_EMPTY],
            total=total,
            affected_days=affected,
        )

    def _ingest_row(self, index: int, row: Mapping[str, object], upload_id: str, touched: Set[DayKey]) -> str:
        try:
            employee_id = validate_employee_id(pick(row, EMPLOYEE_ID_ALIASES))
        except ValidationError as exc:
            logger.warning("Row %d skipped: %s", index, exc)
            return _SKIPPED

        raw_date = pick(row, DATE_ALIASES)
        day = normalize_date(raw_date)
        if day is None:
            logger.warning("Row %d skipped: invalid date %r", index, raw_date)
            return _SKIPPED

        times = normalize_punch_cell(pick(row, PUNCH_ALIASES))
        if not times:
            logger.warning("Row %d has no usable punch time", index)
            return _EMPTY

        self._employees.ensure_exists(employee_id, self._name_for(employee_id, pick(row, NAME_ALIASES)))

        new_punches = 0
        for punch_time in times:
            if self._punches.append_punch(
                employee_id=employee_id,
                date=day,
                time=punch_time,
                source=PunchSource.MANUAL_UPLOAD,
                upload_id=upload_id,
            ):
                new_punches += 1

        if not new_punches:
            return _SKIPPED
        touched.add((employee_id, day))
        return _INSERTED

    @staticmethod
    def _name_for(employee_id: str, raw_name: Optional[str]) -> str:
        try:
            return validate_employee_name(raw_name)
        except ValidationError:
            return default_employee_name(employee_id)
