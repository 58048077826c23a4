"""Turns uploaded files into rows of column name -> text.

CSV and device .dat exports go through the csv module; spreadsheets through
pandas (first sheet only).
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from ..core.exceptions import IngestionError
from .columns import DATE_ALIASES, canonical_column

logger = logging.getLogger(__name__)

Row = Dict[str, str]

# Legacy .xls needs xlrd; openpyxl only reads the xlsx format.
_EXCEL_ENGINES = {".xls": "xlrd", ".xlsx": "openpyxl"}


def _clean_header(name: Optional[str]) -> str:
    return str(name or "").lstrip("\ufeff").strip()


def _is_blank(row: Row) -> bool:
    return not any(v.strip() for v in row.values())


def _cell_text(value: object, header: str = "") -> str:
    """Spreadsheet cell as the text a CSV export would have carried.

    Timestamps keep their time of day except in date columns, so a punch column
    holding full timestamps still yields its times.
    """
    if value is None:
        return ""
    if not isinstance(value, (list, tuple)) and pd.isna(value):
        return ""
    if isinstance(value, datetime):
        if value.time() == time(0, 0) or canonical_column(header) in DATE_ALIASES:
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, float) and value.is_integer():
        # Numeric ids come back as 101.0.
        return str(int(value))
    return str(value).strip()


def parse_csv_bytes(data: bytes, filename: str = "") -> List[Row]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise IngestionError(f"Could not read {filename or 'file'}: not UTF-8 text") from exc

    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        return []
    reader.fieldnames = [_clean_header(h) for h in reader.fieldnames]

    rows: List[Row] = []
    for raw in reader:
        row = {k: (v or "") for k, v in raw.items() if k is not None and not isinstance(v, list)}
        if not _is_blank(row):
            rows.append(row)
    return rows


def parse_excel_bytes(data: bytes, filename: str = "") -> List[Row]:
    engine = _EXCEL_ENGINES.get(Path(filename).suffix.lower(), "openpyxl")
    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0, dtype=object, engine=engine)
    except Exception as exc:
        raise IngestionError(f"Could not read spreadsheet {filename or ''}: {exc}".strip()) from exc

    headers = [_clean_header(c) for c in frame.columns]
    rows: List[Row] = []
    for values in frame.itertuples(index=False, name=None):
        row = {h: _cell_text(v, h) for h, v in zip(headers, values)}
        if not _is_blank(row):
            rows.append(row)
    return rows


def read_rows(source: Union[str, Path, bytes], filename: Optional[str] = None) -> List[Row]:
    """Rows from a file path or from raw uploaded bytes.

    `filename` decides the format for bytes; for paths it defaults to the path's name.
    """

    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
        name = filename or ""
    else:
        path = Path(source)
        name = filename or path.name
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise IngestionError(f"Could not read {name}: {exc.strerror or exc}") from exc

    if not data:
        return []

    if Path(name).suffix.lower() in _EXCEL_ENGINES:
        rows = parse_excel_bytes(data, name)
    else:
        rows = parse_csv_bytes(data, name)
    logger.info("Read %d rows from %s", len(rows), name or "upload")
    return rows
