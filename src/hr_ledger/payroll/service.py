from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.validators import require_amount
from ..core.enums import EmployeeStatus, NotificationKind
from ..core.exceptions import AlreadyProcessedError, DuplicateKeyError, DuplicateRecordError, NotFoundError
from ..employees.model import Employee, SalaryStructure
from ..employees.repository import EmployeeRepository
from ..employees.salary import with_components
from ..notifications.notifier import Notifier, send_quietly
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import BatchResult, PayPeriod, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

PeriodLike = PayPeriod | tuple | str | int


class PayrollEngine:
    """One payroll record per employee per pay period, computed from the salary structure.

    The engine only sums what the employee record holds; percentage-based
    categories are derived when the base salary changes
    (see `employees.salary.recalculate_salary_structure`).
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        notifier: Optional[Notifier] = None,
        clock: Optional[Clock] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._notifier = notifier
        self._clock = clock or SystemClock()

    def _period(self, period: PeriodLike) -> PayPeriod:
        if isinstance(period, PayPeriod):
            return period
        month, *rest = period if isinstance(period, tuple) else (period,)
        year = rest[0] if rest else None
        if year is None and not (isinstance(month, str) and "-" in month):
            year = self._clock.now().year
        return PayPeriod.parse(month, year)

    def _create(self, employee: Employee, period: PayPeriod) -> PayrollRecord:
        breakdown = self._calculator.compute(employee.salary)
        payroll_id = self._payroll.create_record(
            employee_id=employee.employee_id,
            period=period,
            breakdown=breakdown,
        )
        logger.info(
            "Generated payroll %s for employee %s, %s (net %s)",
            payroll_id,
            employee.employee_id,
            period,
            breakdown.net_salary,
        )
        return self.get(payroll_id)

    def get(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        period: Optional[PeriodLike] = None,
        limit: int = 500,
    ) -> Sequence[PayrollRecord]:
        p = self._period(period) if period is not None else None
        return self._payroll.list_records(employee_id=employee_id, period=p, limit=limit)

    def generate(self, employee_id: int, period: PeriodLike) -> PayrollRecord:
        period = self._period(period)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        if self._payroll.get_for_employee_and_period(employee.employee_id, period):
            raise DuplicateRecordError("Payroll already exists for this employee and period")
        try:
            return self._create(employee, period)
        except DuplicateKeyError:
            raise DuplicateRecordError("Payroll already exists for this employee and period")

    def generate_for_all(self, period: PeriodLike) -> BatchResult:
        """Generate for every active employee; existing records are skipped, failures collected."""
        period = self._period(period)
        result = BatchResult(period=period)

        for employee in self._employees.list_by_status(EmployeeStatus.ACTIVE):
            try:
                if self._payroll.get_for_employee_and_period(employee.employee_id, period):
                    result.skipped.append(employee.employee_id)
                    continue
                result.created.append(self._create(employee, period))
            except DuplicateKeyError:
                result.skipped.append(employee.employee_id)
            except Exception as exc:
                logger.exception("Payroll generation failed for employee %s, %s", employee.employee_id, period)
                result.failures[employee.employee_id] = str(exc) or exc.__class__.__name__

        logger.info(
            "Payroll batch %s: %s created, %s skipped, %s failed",
            period,
            len(result.created),
            len(result.skipped),
            len(result.failures),
        )
        return result

    def process(self, payroll_id: int) -> PayrollRecord:
        record = self.get(payroll_id)
        if record.is_paid:
            raise AlreadyProcessedError("Payroll already processed")

        if not self._payroll.mark_paid(payroll_id=record.payroll_id, pay_date=self._clock.now()):
            raise AlreadyProcessedError("Payroll already processed")

        logger.info("Payroll %s processed for employee %s, %s", record.payroll_id, record.employee_id, record.period)
        send_quietly(
            self._notifier,
            record.employee_id,
            NotificationKind.PAYROLL_PROCESSED,
            "Salary Processed",
            f"Your salary for {record.period.label} has been processed",
            "/payroll",
        )
        return self.get(record.payroll_id)

    def update(
        self,
        payroll_id: int,
        *,
        base_salary: Decimal | int | str | None = None,
        allowances: Optional[Mapping[str, object]] = None,
        deductions: Optional[Mapping[str, object]] = None,
    ) -> PayrollRecord:
        """Admin correction of a pending record; every total is recomputed."""
        record = self.get(payroll_id)
        if record.is_paid:
            raise AlreadyProcessedError("Cannot modify processed payroll")

        current = record.breakdown
        base = require_amount(base_salary, "Base salary") if base_salary is not None else current.base_salary
        salary = with_components(
            SalaryStructure(base_salary=base, allowances=current.allowances, deductions=current.deductions),
            allowances=allowances,
            deductions=deductions,
        )
        breakdown = self._calculator.compute(salary)
        if not self._payroll.update_amounts(payroll_id=record.payroll_id, breakdown=breakdown):
            raise AlreadyProcessedError("Cannot modify processed payroll")

        logger.info("Payroll %s updated (net %s -> %s)", record.payroll_id, current.net_salary, breakdown.net_salary)
        return self.get(record.payroll_id)

    def delete(self, payroll_id: int) -> None:
        if not self._payroll.delete_by_id(int(payroll_id)):
            raise NotFoundError("Payroll record not found")
        logger.info("Payroll %s deleted", payroll_id)
