from __future__ import annotations

import re
from typing import List, Optional

from ..common.datetime_utils import normalize_time
from ..core.constants import PUNCH_TOKEN_PATTERN

_PUNCH_SPLIT = re.compile(PUNCH_TOKEN_PATTERN)


def split_punch_cell(value: Optional[str]) -> List[str]:
    """Split one spreadsheet cell holding several times.

    Comma, semicolon, newline, pipe and any run of whitespace all separate
    tokens, so "09:00 18:00" and "09:00|18:00" give the same result.
    """

    if value is None:
        return []
    return [t for t in _PUNCH_SPLIT.split(str(value).strip()) if t]


def normalize_punch_cell(value: Optional[str]) -> List[str]:
    """Canonical HH:MM:SS times found in a cell, in cell order.

    Tokens that are not valid times are dropped one by one; the rest survive.
    """

    times = []
    for token in split_punch_cell(value):
        normalized = normalize_time(token)
        if normalized is not None:
            times.append(normalized)
    return times
