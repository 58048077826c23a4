from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Upload


class UploadRepository(Protocol):
    def create(self, *, upload_id: str, filename: str, uploaded_at: str) -> None:
        raise NotImplementedError

    def update_counters(self, upload_id: str, *, inserted: int, skipped: int, empty: int) -> bool:
        raise NotImplementedError

    def get_by_id(self, upload_id: str) -> Optional[Upload]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Upload]:
        raise NotImplementedError

    def delete(self, upload_id: str) -> bool:
        raise NotImplementedError
