from __future__ import annotations

import io
import threading
from datetime import datetime

import pandas as pd
import pytest
from sqlalchemy.exc import OperationalError

from src.timeclock.timeclock.core.enums import ProgressPhase, PunchSource
from src.timeclock.timeclock.core.exceptions import IngestionError
from src.timeclock.timeclock.punches.cache import DailyAttendanceCache
from src.timeclock.timeclock.ingestion import tabular
from src.timeclock.timeclock.ingestion.service import IngestionService

ROWS = [
    {"UserID": "EMP001", "Date": "04-02-2026", "Time": "09:00, 18:05", "Name": "Asha Rao"},
    {"UserID": "EMP001", "Date": "2026-02-04", "Time": "12:30;13:00"},
    {"UserID": "bad id!", "Date": "2026-02-04", "Time": "09:00"},
    {"UserID": "EMP002", "Date": "31/02/2026", "Time": "09:00"},
    {"UserID": "EMP002", "Date": "2026-02-04", "Time": "n/a"},
]


def test_rows_are_counted_and_cached(container):
    result = container.ingestion_service.ingest_rows(ROWS, "punches.csv")

    assert (result.inserted, result.skipped, result.empty, result.total) == (2, 2, 1, 5)
    assert result.affected_days == 1

    # EMP002 never had a usable punch, so it was not provisioned.
    employees = container.employee_service.list_employees()
    assert [(e.employee_id, e.name) for e in employees] == [("EMP001", "Asha Rao")]

    day = container.daily_repo.get("EMP001", "2026-02-04")
    assert day.punches == ("09:00:00", "12:30:00", "13:00:00", "18:05:00")
    assert day.upload_ids == frozenset({result.upload_id})

    punches = container.punches_repo.punch_rows_for_day("EMP001", "2026-02-04")
    assert {p.source for p in punches} == {PunchSource.MANUAL_UPLOAD}

    upload = container.upload_service.get_upload(result.upload_id)
    assert (upload.records_inserted, upload.records_skipped, upload.records_empty) == (2, 2, 1)


def test_reingesting_same_rows_inserts_nothing(container):
    container.ingestion_service.ingest_rows(ROWS, "punches.csv")
    before = container.daily_repo.get("EMP001", "2026-02-04")

    again = container.ingestion_service.ingest_rows(ROWS, "punches.csv")

    assert again.inserted == 0
    assert again.skipped == 4
    assert again.empty == 1
    assert again.affected_days == 0
    assert container.daily_repo.get("EMP001", "2026-02-04") == before
    assert container.daily_repo.count() == 1


def test_later_upload_merges_into_existing_day(container):
    first = container.ingestion_service.ingest_rows(
        [{"Employee ID": "EMP001", "Date": "2026-02-04", "Punches": "09:00 18:00"}], "morning.csv"
    )
    second = container.ingestion_service.ingest_rows(
        [{"Employee ID": "EMP001", "Date": "2026-02-04", "Punches": "13:00|18:00"}], "afternoon.csv"
    )

    assert second.inserted == 1
    day = container.daily_repo.get("EMP001", "2026-02-04")
    assert day.punches == ("09:00:00", "13:00:00", "18:00:00")
    assert day.upload_ids == frozenset({first.upload_id, second.upload_id})
    assert container.punches_repo.punches_for_day("EMP001", "2026-02-04") == ["09:00:00", "13:00:00", "18:00:00"]


def test_invalid_name_falls_back_to_default(container):
    container.ingestion_service.ingest_rows(
        [{"EmpCode": "FT-123", "Work Date": "2026-02-04", "In Time": "09:00", "Employee Name": "R2-D2"}],
        "device.dat",
    )

    assert container.employee_service.get_employee("FT-123").name == "Employee FT-123"


def test_existing_names_are_not_overwritten(container):
    container.ingestion_service.ingest_rows(
        [{"UserID": "EMP001", "Date": "2026-02-04", "Time": "09:00", "Name": "Asha Rao"}], "a.csv"
    )
    container.ingestion_service.ingest_rows(
        [{"UserID": "EMP001", "Date": "2026-02-05", "Time": "09:00", "Name": "Someone Else"}], "b.csv"
    )

    assert container.employee_service.get_employee("EMP001").name == "Asha Rao"


def test_empty_file_is_not_an_error(container):
    events = []

    result = container.ingestion_service.ingest_bytes(b"", "empty.csv", on_progress=events.append)

    assert (result.inserted, result.skipped, result.empty, result.total) == (0, 0, 0, 0)
    assert container.employee_service.list_employees() == []
    assert events[-1].phase == ProgressPhase.COMPLETE
    assert [u.upload_id for u in container.upload_service.list_uploads()] == [result.upload_id]


def test_header_only_file(container):
    result = container.ingestion_service.ingest_bytes(b"UserID,Date,Time\n", "header.csv")

    assert (result.inserted, result.skipped, result.empty) == (0, 0, 0)


def test_csv_bytes_with_bom_and_regional_formats(container):
    data = "\ufeffUser ID,Date,Time\nEMP001,04-Feb-26,09:00 18:00\nEMP001,,09:00\n".encode("utf-8")

    result = container.ingestion_service.ingest_bytes(data, "export.csv")

    assert (result.inserted, result.skipped, result.empty) == (1, 1, 0)
    assert container.punches_repo.punches_for_day("EMP001", "2026-02-04") == ["09:00:00", "18:00:00"]


def test_excel_upload_reads_first_sheet(container):
    frame = pd.DataFrame(
        {
            "Employee Code": ["EMP003", "EMP004"],
            "Punch Date": [datetime(2026, 2, 4), datetime(2026, 2, 4)],
            "Punch Times": ["09:00 17:30", ""],
        }
    )
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False)

    result = container.ingestion_service.ingest_bytes(buffer.getvalue(), "punches.xlsx")

    assert (result.inserted, result.skipped, result.empty) == (1, 0, 1)
    assert container.punches_repo.punches_for_day("EMP003", "2026-02-04") == ["09:00:00", "17:30:00"]


def test_ingest_file_from_disk(container, tmp_path):
    path = tmp_path / "march.csv"
    path.write_text("UserID,Date,Time\nEMP010,2026-03-02,08:55;17:10\n", encoding="utf-8")

    result = container.ingestion_service.ingest_file(path)

    assert result.filename == "march.csv"
    assert result.inserted == 1


def test_missing_file_reports_error(container, tmp_path):
    events = []

    with pytest.raises(IngestionError):
        container.ingestion_service.ingest_file(tmp_path / "nope.csv", on_progress=events.append)

    assert events[-1].phase == ProgressPhase.ERROR


def test_progress_is_ordered_and_monotonic(container):
    rows = [{"UserID": f"EMP{i:03d}", "Date": "2026-02-04", "Time": "09:00 18:00"} for i in range(1, 41)]
    events = []

    container.ingestion_service.ingest_bytes(
        ("UserID,Date,Time\n" + "".join(f"{r['UserID']},{r['Date']},{r['Time']}\n" for r in rows)).encode(),
        "big.csv",
        on_progress=events.append,
    )

    order = [ProgressPhase.READING, ProgressPhase.PARSING, ProgressPhase.INSERTING, ProgressPhase.COMPLETE]
    positions = [order.index(e.phase) for e in events]
    assert positions == sorted(positions)
    assert set(positions) == {0, 1, 2, 3}

    percents = [e.percent for e in events]
    assert percents == sorted(percents)
    assert all(0 <= p <= 100 for p in percents)
    assert events[-1].percent == 100
    assert events[-1].current == events[-1].total == 40

    inserting = [e for e in events if e.phase == ProgressPhase.INSERTING]
    assert 20 <= len(inserting) <= 22


def test_size_ceiling_aborts_batch(container):
    service = IngestionService(
        container.conn,
        container.employees_repo,
        container.punches_repo,
        container.cache,
        container.uploads_repo,
        max_upload_bytes=16,
    )
    events = []

    with pytest.raises(IngestionError) as excinfo:
        service.ingest_bytes(b"UserID,Date,Time\nEMP001,2026-02-04,09:00\n", "big.csv", on_progress=events.append)

    assert excinfo.value.too_large
    assert events[-1].phase == ProgressPhase.ERROR
    assert container.upload_service.list_uploads() == []


def test_unsupported_extension(container):
    with pytest.raises(IngestionError) as excinfo:
        container.ingestion_service.ingest_bytes(b"UserID,Date,Time\n", "punches.pdf")

    assert not excinfo.value.too_large


class FailingCache(DailyAttendanceCache):
    def rebuild(self, days):
        raise OperationalError("UPDATE daily_attendance", {}, Exception("database is locked"))


def test_storage_failure_rolls_back_everything(container):
    service = IngestionService(
        container.conn,
        container.employees_repo,
        container.punches_repo,
        FailingCache(container.punches_repo, container.daily_repo),
        container.uploads_repo,
    )
    events = []

    with pytest.raises(IngestionError):
        service.ingest_rows(ROWS, "punches.csv", on_progress=events.append)

    assert events[-1].phase == ProgressPhase.ERROR
    assert container.employee_service.list_employees() == []
    assert container.punches_repo.all_days() == []
    assert container.upload_service.list_uploads() == []


def test_failing_progress_callback_aborts_with_error_event(container):
    events = []

    def on_progress(event):
        events.append(event)
        if event.phase == ProgressPhase.INSERTING:
            raise KeyError("progress bar closed")

    with pytest.raises(IngestionError) as excinfo:
        container.ingestion_service.ingest_rows(ROWS, "punches.csv", on_progress=on_progress)

    assert isinstance(excinfo.value.__cause__, KeyError)
    assert events[-1].phase == ProgressPhase.ERROR
    assert container.employee_service.list_employees() == []
    assert container.punches_repo.all_days() == []
    assert container.upload_service.list_uploads() == []


def test_reader_thread_waits_for_open_batch_on_memory_store(container):
    seen = {}
    readers = []

    def read_cache():
        try:
            seen["count"] = container.daily_repo.count()
        except Exception as exc:
            seen["error"] = exc

    def on_progress(event):
        if event.phase == ProgressPhase.INSERTING and not readers:
            reader = threading.Thread(target=read_cache)
            reader.start()
            readers.append(reader)

    result = container.ingestion_service.ingest_rows(ROWS, "punches.csv", on_progress=on_progress)
    readers[0].join(timeout=5)

    assert not readers[0].is_alive()
    assert "error" not in seen
    # The reader only ran once the batch had committed.
    assert seen["count"] == 1
    assert result.inserted == 2
    assert [e.employee_id for e in container.employee_service.list_employees()] == ["EMP001"]
    assert len(container.upload_service.list_uploads()) == 1


def test_excel_timestamps_keep_their_time_of_day(container):
    frame = pd.DataFrame(
        {
            "UserID": ["EMP005", "EMP005"],
            "Date": [datetime(2026, 2, 4, 9, 0), datetime(2026, 2, 4, 18, 0)],
            "Time": [datetime(2026, 2, 4, 9, 0), datetime(2026, 2, 4, 18, 0)],
        }
    )
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False)

    result = container.ingestion_service.ingest_bytes(buffer.getvalue(), "device.xlsx")

    assert (result.inserted, result.skipped, result.empty) == (2, 0, 0)
    assert container.punches_repo.punches_for_day("EMP005", "2026-02-04") == ["09:00:00", "18:00:00"]


def test_legacy_xls_is_read_with_xlrd(monkeypatch):
    engines = []

    def fake_read_excel(buffer, **kwargs):
        engines.append(kwargs["engine"])
        return pd.DataFrame({"UserID": ["EMP006"], "Date": ["2026-02-04"], "Time": ["09:00 18:00"]})

    monkeypatch.setattr(tabular.pd, "read_excel", fake_read_excel)

    rows = tabular.read_rows(b"not-really-xls", "old.xls")

    assert engines == ["xlrd"]
    assert rows == [{"UserID": "EMP006", "Date": "2026-02-04", "Time": "09:00 18:00"}]
