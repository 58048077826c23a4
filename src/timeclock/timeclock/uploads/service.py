from __future__ import annotations

import logging
from typing import Sequence

from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..punches.cache import DailyAttendanceCache
from ..punches.repository import PunchRepository
from .model import Upload
from .repository import UploadRepository

logger = logging.getLogger(__name__)


class UploadService:
    def __init__(
        self,
        db: DatabaseConnection,
        uploads: UploadRepository,
        punches: PunchRepository,
        cache: DailyAttendanceCache,
        *,
        history_limit: int = 100,
    ):
        self._db = db
        self._uploads = uploads
        self._punches = punches
        self._cache = cache
        self._history_limit = int(history_limit)

    def list_uploads(self) -> Sequence[Upload]:
        """Upload history, newest first."""
        return self._uploads.list_recent(self._history_limit)

    def get_upload(self, upload_id: str) -> Upload:
        upload = self._uploads.get_by_id(upload_id)
        if not upload:
            raise NotFoundError(f"Upload {upload_id} not found")
        return upload

    def delete_upload(self, upload_id: str) -> int:
        """Retract an upload and re-derive every employee-day it touched.

        Returns the number of punches removed. Days left without punches lose
        their cache row; the rest are rebuilt from the punches that remain.
        """

        with self._db.transaction():
            self.get_upload(upload_id)

            removed = self._punches.count_for_upload(upload_id)
            affected = self._punches.delete_by_upload(upload_id)
            self._uploads.delete(upload_id)

            self._cache.strip_upload_tag(upload_id, skip=affected)
            rebuilt = self._cache.rebuild(affected)

        logger.info("Deleted upload %s: %d punches removed, %d days rebuilt", upload_id, removed, rebuilt)
        return removed
