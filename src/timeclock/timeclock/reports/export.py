from __future__ import annotations

import csv
import io
from collections import Counter
from typing import Sequence

import pandas as pd

from ..core.enums import DayStatus
from .model import MonthlyGrid, MonthlySummaryRow

SUMMARY_FIELDS = [
    "employeeId",
    "employeeName",
    "fullDay",
    "halfDay",
    "absent",
    "weeklyOff",
    "workedOff",
    "totalPresent",
]

_GRID_TOTALS = (DayStatus.FULL_DAY, DayStatus.HALF_DAY, DayStatus.ABSENT, DayStatus.WEEKLY_OFF, DayStatus.WORKED_OFF)


def monthly_summary_csv(rows: Sequence[MonthlySummaryRow]) -> bytes:
    """CSV with a BOM so spreadsheet apps pick UTF-8."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=SUMMARY_FIELDS)
    writer.writeheader()
    for row in rows:
        writer.writerow(row.as_dict())
    return out.getvalue().encode("utf-8-sig")


def grid_frame(grid: MonthlyGrid) -> pd.DataFrame:
    """One row per employee, one column per covered day (short codes), then totals."""
    records = []
    for row in grid.employees:
        record = {"Employee ID": row.employee_id, "Employee Name": row.employee_name}
        counts = Counter()
        for day, result in row.daily_status.items():
            record[day[-2:]] = result.status.short_code
            counts[result.status] += 1
        for status in _GRID_TOTALS:
            record[status.short_code] = counts[status]
        record["Total Present"] = counts[DayStatus.FULL_DAY] + 0.5 * counts[DayStatus.HALF_DAY]
        records.append(record)
    return pd.DataFrame(records)


def monthly_grid_xlsx(grid: MonthlyGrid) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        grid_frame(grid).to_excel(writer, index=False, sheet_name=grid.month)
    return output.getvalue()
