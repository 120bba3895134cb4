from __future__ import annotations

import pytest

from hr_ledger.core.exceptions import ValidationError
from hr_ledger.payroll.model import PayPeriod


@pytest.mark.parametrize("month", [6, "6", "06", "June", "jun", " JUNE "])
def test_parse_month_forms(month):
    assert PayPeriod.parse(month, 2025) == PayPeriod(2025, 6)


def test_parse_year_month_string():
    assert PayPeriod.parse("2025-06") == PayPeriod(2025, 6)
    assert PayPeriod.parse("2025-06", "2025") == PayPeriod(2025, 6)
    with pytest.raises(ValidationError):
        PayPeriod.parse("2025-06", 2024)


@pytest.mark.parametrize("month, year", [("13", 2025), ("Juno", 2025), (6, None), (6, "twenty")])
def test_parse_rejects_bad_input(month, year):
    with pytest.raises(ValidationError):
        PayPeriod.parse(month, year)


def test_ordering_and_labels():
    assert PayPeriod(2024, 12) < PayPeriod(2025, 1) < PayPeriod(2025, 6)
    assert str(PayPeriod(2025, 6)) == "2025-06"
    assert PayPeriod(2025, 6).label == "June 2025"
