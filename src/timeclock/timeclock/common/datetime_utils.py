from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, Optional, Sequence, Tuple

from ..core.exceptions import ValidationError

_MONTH_NAMES = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_DATE_SEPARATORS = re.compile(r"[-/]")
_TIME_PATTERN = re.compile(r"^(\d{1,2})[:.](\d{2})(?:[:.](\d{2}))?$")
_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def _build_date(year: str, month: str, day: str) -> Optional[str]:
    if not (year.isdigit() and month.isdigit() and day.isdigit()):
        return None
    if len(year) != 4:
        return None
    try:
        value = date(int(year), int(month), int(day))
    except ValueError:
        return None
    return value.isoformat()


def _parse_year_first(parts: Sequence[str]) -> Optional[str]:
    """YYYY-MM-DD (or YYYY/MM/DD)."""
    year, month, day = parts
    if len(year) != 4:
        return None
    return _build_date(year, month, day)


def _parse_day_first(parts: Sequence[str]) -> Optional[str]:
    """DD-MM-YYYY, DD/MM/YYYY, DD-MMM-YY, DD-MMM-YYYY."""
    day, month, year = parts
    month_number = _MONTH_NAMES.get(month.lower())
    if month_number is not None:
        month = str(month_number)
    if len(year) == 2:
        year = "20" + year
    return _build_date(year, month, day)


_DATE_FORMATS: Tuple[Callable[[Sequence[str]], Optional[str]], ...] = (
    _parse_year_first,
    _parse_day_first,
)


def normalize_date(value: Optional[str]) -> Optional[str]:
    """Normalize regional date text to canonical YYYY-MM-DD.

    Returns None when the text cannot be read; callers skip the row.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    parts = [p.strip() for p in _DATE_SEPARATORS.split(text)]
    if len(parts) != 3 or not all(parts):
        return None

    for parse in _DATE_FORMATS:
        result = parse(parts)
        if result:
            return result
    return None


def _time_parts(value: Optional[str]) -> Optional[Tuple[int, int, Optional[int]]]:
    if value is None:
        return None
    match = _TIME_PATTERN.match(str(value).strip())
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) is not None else None
    if hour > 23 or minute > 59:
        return None
    if second is not None and second > 59:
        return None
    return hour, minute, second


def normalize_time(value: Optional[str]) -> Optional[str]:
    """Normalize H:MM, H:MM:SS (':' or '.' separated) to canonical HH:MM:SS."""
    parts = _time_parts(value)
    if parts is None:
        return None
    hour, minute, second = parts
    return f"{hour:02d}:{minute:02d}:{second or 0:02d}"


def time_to_minutes(value: Optional[str]) -> Optional[float]:
    """Minutes since midnight, keeping seconds as a fraction ('09:00:30' -> 540.5)."""
    parts = _time_parts(value)
    if parts is None:
        return None
    hour, minute, second = parts
    return hour * 60 + minute + (second or 0) / 60


def to_12_hour(value: Optional[str]) -> str:
    """Render a 24-hour time as '9:05 AM' (or '9:05:30 AM' when seconds are given)."""
    parts = _time_parts(value)
    if parts is None:
        return ""
    hour, minute, second = parts
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    if second is None:
        return f"{hour12}:{minute:02d} {period}"
    return f"{hour12}:{minute:02d}:{second:02d} {period}"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last calendar day of a 'YYYY-MM' month."""
    match = _MONTH_PATTERN.match(str(month or "").strip())
    if not match:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    year, month_number = int(match.group(1)), int(match.group(2))
    if not 1 <= month_number <= 12:
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end inclusive (nothing when end < start)."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_sunday(value: date) -> bool:
    return value.weekday() == calendar.SUNDAY


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
