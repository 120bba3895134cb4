from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PayPeriod, PayrollBreakdown, PayrollRecord


class PayrollRepository(Protocol):
    """Storage contract for payroll records.

    `create_record` raises DuplicateKeyError when (employee_id, period) exists.
    `update_amounts` and `mark_paid` only touch pending records.
    """

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_employee_and_period(self, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        period: Optional[PayPeriod] = None,
        limit: int = 500,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def create_record(self, *, employee_id: int, period: PayPeriod, breakdown: PayrollBreakdown) -> int:
        raise NotImplementedError

    def update_amounts(self, *, payroll_id: int, breakdown: PayrollBreakdown) -> bool:
        raise NotImplementedError

    def mark_paid(self, *, payroll_id: int, pay_date: datetime) -> bool:
        raise NotImplementedError

    def delete_by_id(self, payroll_id: int) -> bool:
        raise NotImplementedError
