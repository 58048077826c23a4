from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import validate_employee_id, validate_employee_name, validate_in_time
from ..core.exceptions import NotFoundError
from .model import Employee
from .repository import EmployeeRepository


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(validate_employee_id(employee_id))
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def rename_employee(self, employee_id: str, name: str) -> Employee:
        return self.update_employee(employee_id, name=name)

    def update_employee(self, employee_id: str, *, name: str, in_time: Optional[str] = None) -> Employee:
        """Change display name and, optionally, the default in-time.

        Note: Everything is validated before anything is written.
        """

        current = self.get_employee(employee_id)
        clean_name = validate_employee_name(name)
        clean_in_time = validate_in_time(in_time) if in_time is not None else None

        self._employees.update(current.employee_id, name=clean_name, in_time=clean_in_time)
        return Employee(
            employee_id=current.employee_id,
            name=clean_name,
            in_time=clean_in_time or current.in_time,
        )
