from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, LeaveType, Role

ZERO = Decimal("0")


@dataclass(frozen=True)
class Allowances:
    house_rent: Decimal = ZERO
    medical: Decimal = ZERO
    transport: Decimal = ZERO
    special: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.house_rent + self.medical + self.transport + self.special


@dataclass(frozen=True)
class Deductions:
    provident_fund: Decimal = ZERO
    professional_tax: Decimal = ZERO
    income_tax: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.provident_fund + self.professional_tax + self.income_tax + self.other


@dataclass(frozen=True)
class SalaryStructure:
    base_salary: Decimal = ZERO
    allowances: Allowances = field(default_factory=Allowances)
    deductions: Deductions = field(default_factory=Deductions)


@dataclass(frozen=True)
class LeaveBalance:
    """Remaining entitlement per category plus running totals.

    Invariant: remaining == total - used.
    """

    paid: int
    sick: int
    unpaid: int
    total: int
    used: int = 0
    remaining: int = 0

    def for_type(self, leave_type: LeaveType) -> int:
        return int(getattr(self, LeaveType(leave_type).value))

    def charged(self, leave_type: LeaveType, days: int) -> "LeaveBalance":
        """Balance after approving `days` of `leave_type` (no clamping)."""
        key = LeaveType(leave_type).value
        return replace(
            self,
            **{key: self.for_type(leave_type) - days},
            used=self.used + days,
            remaining=self.remaining - days,
        )


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee identity, compensation and leave entitlement."""

    employee_id: int
    employee_code: str
    email: str
    full_name: str
    role: Role
    status: EmployeeStatus
    salary: SalaryStructure
    leave_balance: LeaveBalance
    department: str = "General"
    position: str = "Employee"
    join_date: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
