from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[time]
    check_out: Optional[time]
    hours: float
    status: AttendanceStatus
    remarks: Optional[str] = None

    @property
    def is_checked_out(self) -> bool:
        return self.check_in is not None and self.check_out is not None
