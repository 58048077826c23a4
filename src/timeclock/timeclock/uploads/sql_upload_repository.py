from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import delete, insert, select, update

from ..database.base import db_session, fetchall, fetchone
from ..database.connection import DatabaseConnection
from ..database.schema import uploads
from .model import Upload
from .repository import UploadRepository


def _to_upload(r: dict) -> Upload:
    return Upload(
        upload_id=r["id"],
        filename=r["filename"],
        records_inserted=int(r["records_inserted"] or 0),
        records_skipped=int(r["records_skipped"] or 0),
        records_empty=int(r["records_empty"] or 0),
        uploaded_at=r["uploaded_at"],
    )


class SQLUploadRepository(UploadRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, upload_id: str, filename: str, uploaded_at: str) -> None:
        with db_session(self._conn_factory) as conn:
            conn.execute(insert(uploads).values(id=upload_id, filename=filename, uploaded_at=uploaded_at))

    def update_counters(self, upload_id: str, *, inserted: int, skipped: int, empty: int) -> bool:
        with db_session(self._conn_factory) as conn:
            result = conn.execute(
                update(uploads)
                .where(uploads.c.id == upload_id)
                .values(records_inserted=int(inserted), records_skipped=int(skipped), records_empty=int(empty))
            )
            return result.rowcount > 0

    def get_by_id(self, upload_id: str) -> Optional[Upload]:
        with db_session(self._conn_factory) as conn:
            r = fetchone(conn.execute(select(uploads).where(uploads.c.id == upload_id)))
        return _to_upload(r) if r else None

    def list_recent(self, limit: int) -> Sequence[Upload]:
        with db_session(self._conn_factory) as conn:
            rows = fetchall(
                conn.execute(select(uploads).order_by(uploads.c.uploaded_at.desc(), uploads.c.id).limit(int(limit)))
            )
        return [_to_upload(r) for r in rows]

    def delete(self, upload_id: str) -> bool:
        with db_session(self._conn_factory) as conn:
            return conn.execute(delete(uploads).where(uploads.c.id == upload_id)).rowcount > 0
