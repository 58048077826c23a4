import pytest

from src.timeclock.timeclock.ingestion.columns import canonical_column, pick
from src.timeclock.timeclock.ingestion.tokenizer import normalize_punch_cell, split_punch_cell


@pytest.mark.parametrize(
    "cell",
    ["09:00, 18:00", "09:00;18:00", "09:00 18:00", "09:00\n18:00", "09:00|18:00", "09:00   18:00"],
)
def test_every_delimiter_splits_the_same(cell):
    assert split_punch_cell(cell) == ["09:00", "18:00"]


def test_split_handles_blank_and_padded_cells():
    assert split_punch_cell(None) == []
    assert split_punch_cell("   ") == []
    assert split_punch_cell(" 09:00 ,, 18:00 \n") == ["09:00", "18:00"]


def test_bad_tokens_are_dropped_one_by_one():
    assert normalize_punch_cell("9:00, lunch, 25:00, 18.05") == ["09:00:00", "18:05:00"]
    assert normalize_punch_cell("n/a") == []


def test_column_aliases_ignore_case_and_separators():
    assert canonical_column("User ID") == "userid"
    assert canonical_column("employee_id") == "employeeid"
    assert canonical_column("Punch-Times") == "punchtimes"

    row = {"ID": "7", "Employee Code": " EMP001 ", "Date": "2026-02-04"}
    assert pick(row, ("employeecode", "id")) == "EMP001"
    assert pick({"ID": "7", "Employee Code": "  "}, ("employeecode", "id")) == "7"
    assert pick({"Date": "2026-02-04"}, ("time",)) is None
