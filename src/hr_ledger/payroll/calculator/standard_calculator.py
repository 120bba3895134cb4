from __future__ import annotations

from .base import PayrollCalculator
from ...employees.model import SalaryStructure
from ..model import PayrollBreakdown


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross = base + allowances, net = gross - deductions."""

    def compute(self, salary: SalaryStructure) -> PayrollBreakdown:
        total_allowances = salary.allowances.total
        gross = salary.base_salary + total_allowances
        total_deductions = salary.deductions.total
        return PayrollBreakdown(
            base_salary=salary.base_salary,
            allowances=salary.allowances,
            deductions=salary.deductions,
            total_allowances=total_allowances,
            gross_salary=gross,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
        )
