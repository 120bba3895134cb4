"""Salary structure derivation from a base salary."""

from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from ..common.validators import require_amount
from ..core.constants import (
    HOUSE_RENT_RATE,
    INCOME_TAX_RATE,
    MEDICAL_RATE,
    PROFESSIONAL_TAX,
    PROVIDENT_FUND_RATE,
    SPECIAL_RATE,
    TRANSPORT_RATE,
)
from ..core.exceptions import ValidationError
from .model import Allowances, Deductions, SalaryStructure

ALLOWANCE_FIELDS = ("house_rent", "medical", "transport", "special")
DEDUCTION_FIELDS = ("provident_fund", "professional_tax", "income_tax", "other")


def _share(base: Decimal, rate: Decimal) -> Decimal:
    # Whole currency units, half rounded up.
    return (base * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def recalculate_salary_structure(
    base_salary: Decimal,
    *,
    current: Optional[SalaryStructure] = None,
) -> SalaryStructure:
    """Derive every percentage-based category from `base_salary`.

    The `other` deduction is not percentage-based and is carried over from
    `current` when given.
    """
    base = Decimal(base_salary)
    other = current.deductions.other if current else Decimal("0")

    allowances = Allowances(
        house_rent=_share(base, HOUSE_RENT_RATE),
        medical=_share(base, MEDICAL_RATE),
        transport=_share(base, TRANSPORT_RATE),
        special=_share(base, SPECIAL_RATE),
    )
    deductions = Deductions(
        provident_fund=_share(base, PROVIDENT_FUND_RATE),
        professional_tax=PROFESSIONAL_TAX,
        income_tax=_share(base, INCOME_TAX_RATE),
        other=other,
    )
    if current is not None:
        return replace(current, base_salary=base, allowances=allowances, deductions=deductions)
    return SalaryStructure(base_salary=base, allowances=allowances, deductions=deductions)


def with_components(
    salary: SalaryStructure,
    *,
    allowances: Optional[Mapping[str, object]] = None,
    deductions: Optional[Mapping[str, object]] = None,
) -> SalaryStructure:
    """Return `salary` with individual categories replaced by explicit amounts."""
    a = _validated(allowances or {}, ALLOWANCE_FIELDS, "allowance")
    d = _validated(deductions or {}, DEDUCTION_FIELDS, "deduction")
    return replace(
        salary,
        allowances=replace(salary.allowances, **a),
        deductions=replace(salary.deductions, **d),
    )


def _validated(values: Mapping[str, object], allowed: tuple[str, ...], label: str) -> dict:
    unknown = set(values) - set(allowed)
    if unknown:
        raise ValidationError(f"Unknown {label} categories: {', '.join(sorted(unknown))}")
    return {k: require_amount(v, k) for k, v in values.items()}
