"""Derived attendance fields.

Called explicitly before every attendance write so `hours` and `status`
never drift from `check_in`/`check_out`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.time_math import elapsed_hours
from ..core.constants import FULL_DAY_HOURS, HALF_DAY_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedFields:
    hours: float
    status: AttendanceStatus


def status_for_hours(hours: float, prior: AttendanceStatus = AttendanceStatus.ABSENT) -> AttendanceStatus:
    if hours >= FULL_DAY_HOURS:
        return AttendanceStatus.PRESENT
    if hours >= HALF_DAY_HOURS:
        return AttendanceStatus.HALF_DAY
    return prior


def derive_attendance_fields(
    check_in: Optional[time],
    check_out: Optional[time],
    *,
    prior_status: AttendanceStatus = AttendanceStatus.ABSENT,
    status_override: Optional[AttendanceStatus] = None,
    strict: bool = False,
) -> DerivedFields:
    """Compute hours and status from the two times of day.

    Hours are 0 until both times are known. An explicit `status_override`
    wins over the threshold rule. In strict mode a check-out earlier than the
    check-in is rejected; otherwise negative hours are kept as-is.
    """
    if check_in is None or check_out is None:
        return DerivedFields(hours=0.0, status=status_override or prior_status)

    hours = elapsed_hours(check_in, check_out)
    if hours < 0:
        if strict:
            raise ValidationError("Check-out time cannot be earlier than check-in time")
        logger.warning("Check-out %s precedes check-in %s; hours=%s", check_out, check_in, hours)

    status = status_override or status_for_hours(hours, prior_status)
    return DerivedFields(hours=hours, status=status)
