from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Storage contract for attendance.

    `create_record` raises DuplicateKeyError when (employee_id, work_date) exists.
    `set_check_in` / `set_check_out` only touch a record whose respective time is
    still empty and return False otherwise.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 31,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: Optional[time],
        check_out: Optional[time],
        hours: float,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_check_in(self, *, attendance_id: int, check_in: time, hours: float, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def set_check_out(self, *, attendance_id: int, check_out: time, hours: float, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in: Optional[time],
        check_out: Optional[time],
        hours: float,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        """Admin-only override used for HR corrections."""

        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
