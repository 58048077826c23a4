from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from ..core.constants import DEFAULT_IN_TIME

_DIGITS = re.compile(r"\d+")


@dataclass(frozen=True)
class Employee:
    """Domain entity: one person whose punches are tracked.

    `in_time` is the expected shift start shown by the UI; it never changes
    how a day is classified.
    """

    employee_id: str
    name: str
    in_time: str = DEFAULT_IN_TIME

    @property
    def sort_key(self) -> Tuple[int, str]:
        # EMP2 before EMP10: order by the numeric part, then by the raw id.
        digits = "".join(_DIGITS.findall(self.employee_id))
        return (int(digits) if digits else 0, self.employee_id)


def default_employee_name(employee_id: str) -> str:
    return f"Employee {employee_id}"
