from __future__ import annotations

from abc import ABC, abstractmethod

from ...employees.model import SalaryStructure
from ..model import PayrollBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, salary: SalaryStructure) -> PayrollBreakdown:
        raise NotImplementedError
