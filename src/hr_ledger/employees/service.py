from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.validators import require_amount, require_choice, require_non_empty, require_pattern
from ..core.constants import (
    DEFAULT_BASE_SALARY,
    DEFAULT_LEAVE_ENTITLEMENT,
    DEFAULT_LEAVE_TOTAL,
    EMAIL_PATTERN,
    EMPLOYEE_CODE_PATTERN,
)
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import DuplicateKeyError, DuplicateRecordError, NotFoundError, ValidationError
from .model import Employee, LeaveBalance, SalaryStructure
from .repository import EmployeeRepository
from .salary import recalculate_salary_structure, with_components

logger = logging.getLogger(__name__)


def default_leave_balance() -> LeaveBalance:
    return LeaveBalance(
        paid=DEFAULT_LEAVE_ENTITLEMENT["paid"],
        sick=DEFAULT_LEAVE_ENTITLEMENT["sick"],
        unpaid=DEFAULT_LEAVE_ENTITLEMENT["unpaid"],
        total=DEFAULT_LEAVE_TOTAL,
        used=0,
        remaining=DEFAULT_LEAVE_TOTAL,
    )


class EmployeeService:
    """Use case: hire employees and keep their salary structure consistent."""

    def __init__(self, employees: EmployeeRepository, *, clock: Optional[Clock] = None):
        self._employees = employees
        self._clock = clock or SystemClock()

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_active(self) -> Sequence[Employee]:
        return self._employees.list_by_status(EmployeeStatus.ACTIVE)

    def hire(
        self,
        *,
        employee_code: str,
        email: str,
        full_name: str,
        base_salary: Decimal | int | str = DEFAULT_BASE_SALARY,
        role: Role | str = Role.EMPLOYEE,
        department: str = "General",
        position: str = "Employee",
        join_date: Optional[date] = None,
    ) -> int:
        employee_code = require_pattern(employee_code, "Employee code", EMPLOYEE_CODE_PATTERN)
        email = require_pattern(email, "Email", EMAIL_PATTERN).lower()
        full_name = require_non_empty(full_name, "Name")
        role = require_choice(role, Role, "Role")
        base = require_amount(base_salary, "Base salary")

        if self._employees.get_by_code(employee_code):
            raise DuplicateRecordError(f"Employee code {employee_code} already exists")

        try:
            employee_id = self._employees.create_employee(
                employee_code=employee_code,
                email=email,
                full_name=full_name,
                role=role,
                status=EmployeeStatus.ACTIVE,
                department=(department or "General").strip(),
                position=(position or "Employee").strip(),
                join_date=join_date or self._clock.now().date(),
                salary=recalculate_salary_structure(base),
                leave_balance=default_leave_balance(),
            )
        except DuplicateKeyError:
            raise DuplicateRecordError("Employee code or email already exists")

        logger.info("Hired employee %s (id=%s)", employee_code, employee_id)
        return employee_id

    def change_base_salary(self, employee_id: int, new_base_salary: Decimal | int | str) -> SalaryStructure:
        """Set a new base salary and re-derive every percentage-based category."""
        employee = self.get(employee_id)
        base = require_amount(new_base_salary, "Base salary")

        salary = recalculate_salary_structure(base, current=employee.salary)
        if not self._employees.update_salary_structure(employee_id=employee.employee_id, salary=salary):
            raise NotFoundError("Employee not found")

        logger.info(
            "Recalculated salary structure for employee %s: base %s -> %s",
            employee.employee_id,
            employee.salary.base_salary,
            base,
        )
        return salary

    def override_salary_components(
        self,
        employee_id: int,
        *,
        allowances: Optional[Mapping[str, object]] = None,
        deductions: Optional[Mapping[str, object]] = None,
    ) -> SalaryStructure:
        """Explicitly set individual categories, leaving the base salary untouched."""
        employee = self.get(employee_id)
        if not allowances and not deductions:
            raise ValidationError("Nothing to override")

        salary = with_components(employee.salary, allowances=allowances, deductions=deductions)
        if not self._employees.update_salary_structure(employee_id=employee.employee_id, salary=salary):
            raise NotFoundError("Employee not found")

        changed = sorted({*(allowances or {}), *(deductions or {})})
        logger.info("Overrode salary components %s for employee %s", changed, employee.employee_id)
        return salary

    def set_status(self, employee_id: int, status: EmployeeStatus | str) -> None:
        status = require_choice(status, EmployeeStatus, "Status")
        employee = self.get(employee_id)
        if not self._employees.set_status(employee.employee_id, status=status):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s status %s -> %s", employee.employee_id, employee.status.value, status.value)

    def deactivate(self, employee_id: int) -> None:
        self.set_status(employee_id, EmployeeStatus.INACTIVE)
