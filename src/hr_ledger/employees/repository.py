from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, Role
from .model import Employee, LeaveBalance, SalaryStructure


class EmployeeRepository(Protocol):
    """Storage contract for employees.

    Note (DIP): services depend on this interface, not on a concrete database.
    `create_employee` raises DuplicateKeyError on a taken code or email.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_status(self, status: EmployeeStatus) -> Sequence[Employee]:
        raise NotImplementedError

    def create_employee(
        self,
        *,
        employee_code: str,
        email: str,
        full_name: str,
        role: Role,
        status: EmployeeStatus,
        department: str,
        position: str,
        join_date: Optional[date],
        salary: SalaryStructure,
        leave_balance: LeaveBalance,
    ) -> int:
        raise NotImplementedError

    def update_salary_structure(self, *, employee_id: int, salary: SalaryStructure) -> bool:
        raise NotImplementedError

    def set_status(self, employee_id: int, *, status: EmployeeStatus) -> bool:
        raise NotImplementedError
