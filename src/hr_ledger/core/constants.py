"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

# Attendance status thresholds (worked hours)
FULL_DAY_HOURS = 8
HALF_DAY_HOURS = 4

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"

# Leave
LEAVE_REASON_MIN_LENGTH = 10
DEFAULT_LEAVE_ENTITLEMENT = {
    "paid": 12,
    "sick": 7,
    "unpaid": 5,
}
DEFAULT_LEAVE_TOTAL = 24

# Salary structure, as a share of base salary
HOUSE_RENT_RATE = Decimal("0.20")
MEDICAL_RATE = Decimal("0.067")
TRANSPORT_RATE = Decimal("0.04")
SPECIAL_RATE = Decimal("0.027")
PROVIDENT_FUND_RATE = Decimal("0.12")
INCOME_TAX_RATE = Decimal("0.10")
PROFESSIONAL_TAX = Decimal("200")

DEFAULT_BASE_SALARY = Decimal("50000")

EMPLOYEE_CODE_PATTERN = r"^EMP\d{3,}$"
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

DEFAULT_HISTORY_LIMIT = 31
