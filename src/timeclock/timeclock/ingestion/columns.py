from __future__ import annotations

import re
from typing import Mapping, Optional

_IGNORED = re.compile(r"[\s_\-]+")

EMPLOYEE_ID_ALIASES = ("userid", "employeeid", "empid", "employeecode", "empcode", "id")
DATE_ALIASES = ("date", "punchdate", "attendancedate", "workdate")
PUNCH_ALIASES = ("time", "times", "punch", "punches", "punchtime", "punchtimes", "intime")
NAME_ALIASES = ("employeename", "name")


def canonical_column(name: str) -> str:
    """'User ID', 'user_id' and 'USER-ID' all become 'userid'."""
    return _IGNORED.sub("", str(name or "")).lower()


def pick(row: Mapping[str, object], aliases) -> Optional[str]:
    """First non-blank value among the row's columns matching an alias, in alias order."""
    by_name = {}
    for key, value in row.items():
        by_name.setdefault(canonical_column(key), value)

    for alias in aliases:
        value = by_name.get(alias)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None
