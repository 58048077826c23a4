from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Upload:
    """Provenance of one ingestion batch."""

    upload_id: str
    filename: str
    records_inserted: int
    records_skipped: int
    records_empty: int
    uploaded_at: str


@dataclass(frozen=True)
class UploadResult:
    """What an ingestion run reports back to its caller."""

    upload_id: str
    filename: str
    inserted: int
    skipped: int
    empty: int
    total: int
    affected_days: int

    def as_dict(self) -> dict:
        return {
            "uploadId": self.upload_id,
            "filename": self.filename,
            "inserted": self.inserted,
            "skipped": self.skipped,
            "empty": self.empty,
            "total": self.total,
            "affectedDays": self.affected_days,
        }
