from __future__ import annotations

import re
from pathlib import PurePath
from typing import Iterable, Optional

from werkzeug.utils import secure_filename

from ..core.constants import (
    ALLOWED_UPLOAD_EXTENSIONS,
    EMPLOYEE_ID_MAX_LENGTH,
    EMPLOYEE_NAME_MAX_LENGTH,
    EMPLOYEE_NAME_MIN_LENGTH,
)
from ..core.exceptions import ValidationError

_EMPLOYEE_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
_EMPLOYEE_NAME_PATTERN = re.compile(r"^[A-Za-z\s'.-]+$")
_IN_TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def validate_employee_id(value: Optional[str]) -> str:
    """Alphanumeric plus hyphen, at most 20 characters (EMP001, FT-123)."""
    employee_id = require_non_empty(value, "Employee ID")
    if len(employee_id) > EMPLOYEE_ID_MAX_LENGTH:
        raise ValidationError(f"Employee ID must be {EMPLOYEE_ID_MAX_LENGTH} characters or less")
    if not _EMPLOYEE_ID_PATTERN.match(employee_id):
        raise ValidationError("Employee ID can only contain letters, numbers, and hyphens")
    return employee_id


def validate_employee_name(value: Optional[str]) -> str:
    name = require_non_empty(value, "Employee name")
    if len(name) < EMPLOYEE_NAME_MIN_LENGTH:
        raise ValidationError(f"Employee name must be at least {EMPLOYEE_NAME_MIN_LENGTH} characters")
    if len(name) > EMPLOYEE_NAME_MAX_LENGTH:
        raise ValidationError(f"Employee name must be {EMPLOYEE_NAME_MAX_LENGTH} characters or less")
    if not _EMPLOYEE_NAME_PATTERN.match(name):
        raise ValidationError(
            "Employee name can only contain letters, spaces, hyphens, apostrophes, and periods"
        )
    return name


def validate_in_time(value: Optional[str]) -> str:
    """Default shift start shown in the UI, HH:MM 24-hour."""
    text = require_non_empty(value, "In time")
    match = _IN_TIME_PATTERN.match(text)
    if not match:
        raise ValidationError("In time must be in HH:MM format")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def validate_file_size(size_bytes: int, max_bytes: int) -> int:
    if size_bytes is None or size_bytes < 0:
        raise ValidationError("Invalid file size")
    if size_bytes > max_bytes:
        raise ValidationError(f"File size exceeds {max_bytes // (1024 * 1024)}MB limit")
    return size_bytes


def validate_file_extension(filename: str, allowed: Iterable[str] = ALLOWED_UPLOAD_EXTENSIONS) -> str:
    allowed = tuple(allowed)
    extension = PurePath(filename or "").suffix.lower()
    if extension not in allowed:
        raise ValidationError(f"Invalid file type. Allowed types: {', '.join(allowed)}")
    return extension


def sanitize_filename(filename: Optional[str]) -> str:
    """Strip path components and unsafe characters before a filename is stored."""
    cleaned = secure_filename(filename or "")
    if not cleaned:
        raise ValidationError("Invalid filename")
    return cleaned[:255]
