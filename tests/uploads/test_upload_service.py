from __future__ import annotations

import pytest

from src.timeclock.timeclock.core.exceptions import NotFoundError

MORNING = [
    {"UserID": "EMP001", "Date": "2026-02-04", "Time": "09:00, 18:00"},
    {"UserID": "EMP001", "Date": "2026-02-05", "Time": "09:10 17:55"},
    {"UserID": "EMP002", "Date": "2026-02-04", "Time": "10:00|19:00"},
]
AFTERNOON = [
    {"UserID": "EMP001", "Date": "2026-02-04", "Time": "13:00; 18:00"},
]


def _cache_state(container):
    rows = container.daily_repo.list_between("2026-02-01", "2026-02-28")
    return {row.key: row.punches for row in rows}


def test_delete_rebuilds_days_from_remaining_punches(container):
    morning = container.ingestion_service.ingest_rows(MORNING, "morning.csv")
    afternoon = container.ingestion_service.ingest_rows(AFTERNOON, "afternoon.csv")

    removed = container.upload_service.delete_upload(afternoon.upload_id)

    # 18:00 was already stored by the morning upload, so only 13:00 belonged to this one.
    assert removed == 1
    day = container.daily_repo.get("EMP001", "2026-02-04")
    assert day.punches == ("09:00:00", "18:00:00")
    assert day.upload_ids == frozenset({morning.upload_id})
    with pytest.raises(NotFoundError):
        container.upload_service.get_upload(afternoon.upload_id)


def test_delete_removes_days_left_without_punches(container):
    morning = container.ingestion_service.ingest_rows(MORNING, "morning.csv")

    removed = container.upload_service.delete_upload(morning.upload_id)

    assert removed == 6
    assert _cache_state(container) == {}
    assert container.punches_repo.all_days() == []
    # Employees stay; only punches and cache rows go.
    assert len(container.employee_service.list_employees()) == 2


def test_delete_then_reingest_restores_cache(container):
    first = container.ingestion_service.ingest_rows(MORNING, "morning.csv")
    container.ingestion_service.ingest_rows(AFTERNOON, "afternoon.csv")
    before = _cache_state(container)

    container.upload_service.delete_upload(first.upload_id)
    container.ingestion_service.ingest_rows(MORNING, "morning.csv")

    assert _cache_state(container) == before


def test_delete_unknown_upload(container):
    with pytest.raises(NotFoundError):
        container.upload_service.delete_upload("does-not-exist")


def test_legacy_rows_only_lose_the_upload_tag(container):
    container.employees_repo.ensure_exists("EMP009", "Legacy Person")
    container.uploads_repo.create(upload_id="legacy1", filename="old.csv", uploaded_at="2025-12-01 10:00:00")
    container.daily_repo.upsert(
        employee_id="EMP009",
        date="2025-12-01",
        punches="09:00:00, 18:00:00",
        upload_ids="legacy1,legacy10",
    )

    removed = container.upload_service.delete_upload("legacy1")

    assert removed == 0
    row = container.daily_repo.get("EMP009", "2025-12-01")
    assert row.punches == ("09:00:00", "18:00:00")
    assert row.upload_ids == frozenset({"legacy10"})


def test_list_uploads_newest_first(container, monkeypatch):
    from src.timeclock.timeclock.ingestion import service as ingestion_module

    stamps = iter(["2026-02-01 09:00:00", "2026-02-02 09:00:00"])
    monkeypatch.setattr(ingestion_module, "timestamp_now", lambda: next(stamps))

    older = container.ingestion_service.ingest_rows(MORNING, "older.csv")
    newer = container.ingestion_service.ingest_rows(AFTERNOON, "newer.csv")

    assert [u.upload_id for u in container.upload_service.list_uploads()] == [newer.upload_id, older.upload_id]
