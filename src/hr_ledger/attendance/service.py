from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.time_math import format_hhmm, parse_hhmm
from ..common.validators import require_choice
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    DuplicateKeyError,
    DuplicateRecordError,
    InvalidDateRangeError,
    NoCheckInFoundError,
    NotFoundError,
)
from ..employees.repository import EmployeeRepository
from .derivation import derive_attendance_fields
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_KEEP = object()


class AttendanceLedger:
    """One attendance record per employee per day, with derived hours and status.

    "Today" comes from the injected clock. With ``strict=True`` a check-out
    earlier than the check-in is rejected instead of producing negative hours.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        clock: Optional[Clock] = None,
        strict: bool = False,
    ):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or SystemClock()
        self._strict = bool(strict)

    def _resolve(self, at: str | time | None, work_date: Optional[date]) -> tuple[date, time]:
        now = self._clock.now()
        at_time = parse_hhmm(at) if at is not None else now.time().replace(second=0, microsecond=0)
        return (work_date or now.date()), at_time

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

    def check_in(
        self,
        employee_id: int,
        *,
        at: str | time | None = None,
        work_date: Optional[date] = None,
    ) -> AttendanceRecord:
        work_date, at_time = self._resolve(at, work_date)
        self._require_employee(employee_id)

        existing = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if existing and existing.check_in is not None:
            raise AlreadyCheckedInError("Already checked in today")

        if existing:
            derived = derive_attendance_fields(
                at_time,
                existing.check_out,
                prior_status=AttendanceStatus.PRESENT,
                strict=self._strict,
            )
            ok = self._attendance.set_check_in(
                attendance_id=existing.attendance_id,
                check_in=at_time,
                hours=derived.hours,
                status=derived.status,
            )
            if not ok:
                raise AlreadyCheckedInError("Already checked in today")
        else:
            try:
                self._attendance.create_record(
                    employee_id=int(employee_id),
                    work_date=work_date,
                    check_in=at_time,
                    check_out=None,
                    hours=0.0,
                    status=AttendanceStatus.PRESENT,
                )
            except DuplicateKeyError:
                raise AlreadyCheckedInError("Already checked in today")

        logger.info("Employee %s checked in at %s on %s", employee_id, format_hhmm(at_time), work_date)
        return self._attendance.get_for_employee_and_date(int(employee_id), work_date)

    def check_out(
        self,
        employee_id: int,
        *,
        at: str | time | None = None,
        work_date: Optional[date] = None,
    ) -> AttendanceRecord:
        work_date, at_time = self._resolve(at, work_date)

        record = self._attendance.get_for_employee_and_date(int(employee_id), work_date)
        if not record:
            raise NoCheckInFoundError("No check-in record found for today")
        if record.check_in is None:
            raise NoCheckInFoundError("Check-in not recorded")
        if record.check_out is not None:
            raise AlreadyCheckedOutError("Already checked out today")

        derived = derive_attendance_fields(
            record.check_in,
            at_time,
            prior_status=record.status,
            strict=self._strict,
        )
        ok = self._attendance.set_check_out(
            attendance_id=record.attendance_id,
            check_out=at_time,
            hours=derived.hours,
            status=derived.status,
        )
        if not ok:
            raise AlreadyCheckedOutError("Already checked out today")

        logger.info(
            "Employee %s checked out at %s on %s (hours=%s, status=%s)",
            employee_id,
            format_hhmm(at_time),
            work_date,
            derived.hours,
            derived.status.value,
        )
        return self._attendance.get_for_employee_and_date(int(employee_id), work_date)

    def record_for(self, employee_id: int, work_date: Optional[date] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), work_date or self._clock.now().date())

    def history(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        if start and end and end < start:
            raise InvalidDateRangeError("End date must be on or after start date")
        return self._attendance.list_for_employee(int(employee_id), start_date=start, end_date=end, limit=limit)

    def admin_create(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: str | time | None = None,
        check_out: str | time | None = None,
        status: AttendanceStatus | str | None = None,
        remarks: Optional[str] = None,
    ) -> int:
        """HR/admin entry that bypasses the check-in/check-out flow."""
        self._require_employee(employee_id)
        override = require_choice(status, AttendanceStatus, "Status") if status is not None else None
        in_t, out_t = parse_hhmm(check_in), parse_hhmm(check_out)

        derived = derive_attendance_fields(in_t, out_t, status_override=override, strict=self._strict)
        try:
            attendance_id = self._attendance.create_record(
                employee_id=int(employee_id),
                work_date=work_date,
                check_in=in_t,
                check_out=out_t,
                hours=derived.hours,
                status=derived.status,
                remarks=(remarks or "").strip() or None,
            )
        except DuplicateKeyError:
            raise DuplicateRecordError(f"Attendance for employee {employee_id} on {work_date} already exists")

        logger.info("Attendance record %s created by admin for employee %s on %s", attendance_id, employee_id, work_date)
        return attendance_id

    def admin_update(
        self,
        attendance_id: int,
        *,
        check_in=_KEEP,
        check_out=_KEEP,
        status: AttendanceStatus | str | None = None,
        remarks=_KEEP,
    ) -> AttendanceRecord:
        """HR/admin correction; omitted fields keep their current value, ``None`` clears a time.

        The status is re-derived only when a time changes; an edit that leaves
        both times alone keeps the stored status unless a new one is given.
        """
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        in_t = record.check_in if check_in is _KEEP else parse_hhmm(check_in)
        out_t = record.check_out if check_out is _KEEP else parse_hhmm(check_out)
        new_remarks = record.remarks if remarks is _KEEP else ((remarks or "").strip() or None)
        override = require_choice(status, AttendanceStatus, "Status") if status is not None else None
        if override is None and (in_t, out_t) == (record.check_in, record.check_out):
            override = record.status

        derived = derive_attendance_fields(
            in_t,
            out_t,
            prior_status=record.status,
            status_override=override,
            strict=self._strict,
        )
        if not self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            check_in=in_t,
            check_out=out_t,
            hours=derived.hours,
            status=derived.status,
            remarks=new_remarks,
        ):
            raise NotFoundError("Attendance record not found")

        logger.info("Attendance record %s updated by admin", record.attendance_id)
        return self._attendance.get_by_id(record.attendance_id)

    def admin_delete(self, attendance_id: int) -> None:
        if not self._attendance.delete_by_id(int(attendance_id)):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance record %s deleted", attendance_id)
