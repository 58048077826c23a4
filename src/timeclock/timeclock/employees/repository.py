from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def ensure_exists(self, employee_id: str, name: str) -> bool:
        """Insert the employee unless present. Returns True when created."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update(self, employee_id: str, *, name: str, in_time: Optional[str] = None) -> bool:
        raise NotImplementedError
