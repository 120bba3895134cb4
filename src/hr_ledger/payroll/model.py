from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError
from ..employees.model import Allowances, Deductions

_MONTHS = {name.lower(): i for i, name in enumerate(calendar.month_name) if name}
_MONTHS.update({name.lower(): i for i, name in enumerate(calendar.month_abbr) if name})
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


@dataclass(frozen=True, order=True)
class PayPeriod:
    """One payroll cycle; ordered by (year, month)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= int(self.month) <= 12:
            raise ValidationError(f"Invalid month {self.month!r}")
        if not 1900 <= int(self.year) <= 9999:
            raise ValidationError(f"Invalid year {self.year!r}")

    @classmethod
    def parse(cls, month: int | str, year: int | str | None = None) -> "PayPeriod":
        """Accept 6, "6", "June", "Jun" (with `year`) or "2025-06"."""
        if isinstance(month, int):
            m = month
        else:
            text = str(month or "").strip()
            match = _YEAR_MONTH.match(text)
            if match:
                parsed_year = int(match.group(1))
                if year is not None and int(year) != parsed_year:
                    raise ValidationError(f"Month {text!r} does not match year {year!r}")
                return cls(year=parsed_year, month=int(match.group(2)))
            if text.isdigit():
                m = int(text)
            elif text.lower() in _MONTHS:
                m = _MONTHS[text.lower()]
            else:
                raise ValidationError(f"Invalid month {month!r}")

        if year is None or str(year).strip() == "":
            raise ValidationError("Please provide month and year")
        try:
            y = int(year)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid year {year!r}")
        return cls(year=y, month=m)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class PayrollBreakdown:
    """Monetary fields of a payroll record, totals included."""

    base_salary: Decimal
    allowances: Allowances
    deductions: Deductions
    total_allowances: Decimal
    gross_salary: Decimal
    total_deductions: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    period: PayPeriod
    breakdown: PayrollBreakdown
    status: PayrollStatus = PayrollStatus.PENDING
    pay_date: Optional[datetime] = None

    @property
    def net_salary(self) -> Decimal:
        return self.breakdown.net_salary

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID


@dataclass
class BatchResult:
    """Outcome of generating payroll for every active employee."""

    period: PayPeriod
    created: list[PayrollRecord] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failures: dict[int, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.created)
