from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import parse_iso_date
from ..common.time_math import inclusive_day_count
from ..common.validators import require_choice, require_min_length, require_non_empty
from ..core.constants import LEAVE_REASON_MIN_LENGTH
from ..core.enums import REVIEWER_ROLES, LeaveStatus, LeaveType, NotificationKind, Role
from ..core.exceptions import (
    AlreadyProcessedError,
    AuthorizationError,
    InsufficientBalanceError,
    InvalidDateRangeError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee, LeaveBalance
from ..employees.repository import EmployeeRepository
from ..notifications.notifier import Notifier, send_quietly
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveLedger:
    """Leave requests, the approval state machine and the balance they charge.

    pending -> approved | rejected; both terminal. Approval and the balance
    charge are a single storage operation.

    Permissive by default: `apply` only requires a positive category balance
    and `approve` may drive counters negative. ``strict=True`` requires the
    balance to cover the requested days at both steps.
    """

    def __init__(
        self,
        requests: LeaveRepository,
        employees: EmployeeRepository,
        *,
        notifier: Optional[Notifier] = None,
        clock: Optional[Clock] = None,
        strict: bool = False,
    ):
        self._requests = requests
        self._employees = employees
        self._notifier = notifier
        self._clock = clock or SystemClock()
        self._strict = bool(strict)

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _pending(self, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if not req.is_pending:
            raise AlreadyProcessedError("Leave request already processed")
        return req

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: LeaveStatus | str | None = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        status = require_choice(status, LeaveStatus, "Status") if status is not None else None
        return self._requests.list_requests(employee_id=employee_id, status=status, limit=limit)

    def balance_for(self, employee_id: int) -> LeaveBalance:
        return self._employee(employee_id).leave_balance

    def apply(
        self,
        employee_id: int,
        leave_type: LeaveType | str,
        start_date: date | str,
        end_date: date | str,
        reason: str,
    ) -> LeaveRequest:
        if not leave_type or not start_date or not end_date or not reason:
            raise ValidationError("Please provide all required fields")

        leave_type = require_choice(leave_type, LeaveType, "Leave type")
        start, end = parse_iso_date(start_date), parse_iso_date(end_date)
        if end < start:
            raise InvalidDateRangeError("End date must be on or after start date")

        reason = require_non_empty(reason, "Reason")
        require_min_length(reason, "Reason", LEAVE_REASON_MIN_LENGTH)

        employee = self._employee(employee_id)
        days = inclusive_day_count(start, end)
        balance = employee.leave_balance.for_type(leave_type)
        if balance <= 0:
            raise InsufficientBalanceError(f"Insufficient {leave_type.value} leave balance")
        if self._strict and balance < days:
            raise InsufficientBalanceError(
                f"Insufficient {leave_type.value} leave balance: {balance} left, {days} requested"
            )

        request_id = self._requests.create_leave(
            employee_id=employee.employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            days=days,
            reason=reason,
            applied_at=self._clock.now(),
        )
        logger.info(
            "Employee %s applied for %s day(s) of %s leave (request %s)",
            employee.employee_id,
            days,
            leave_type.value,
            request_id,
        )
        return self.get(request_id)

    def approve(self, request_id: int, reviewer_id: int, comments: Optional[str] = None) -> LeaveRequest:
        req = self._pending(request_id)
        employee = self._employee(req.employee_id)

        after = employee.leave_balance.charged(req.leave_type, req.days)
        short = after.for_type(req.leave_type) < 0 or after.remaining < 0
        if short and self._strict:
            raise InsufficientBalanceError(f"Insufficient {req.leave_type.value} leave balance")
        if short:
            logger.warning(
                "Approving request %s drives employee %s %s balance to %s (remaining %s)",
                req.request_id,
                employee.employee_id,
                req.leave_type.value,
                after.for_type(req.leave_type),
                after.remaining,
            )

        ok = self._requests.approve_and_charge(
            request_id=req.request_id,
            reviewed_by=int(reviewer_id),
            reviewed_at=self._clock.now(),
            comments=(comments or "").strip() or "Approved",
            employee_id=employee.employee_id,
            leave_type=req.leave_type,
            days=req.days,
            require_sufficient=self._strict,
        )
        if not ok:
            raise AlreadyProcessedError("Leave request already processed")

        logger.info("Leave request %s approved by %s; %s day(s) charged", req.request_id, reviewer_id, req.days)
        send_quietly(
            self._notifier,
            req.employee_id,
            NotificationKind.LEAVE_APPROVED,
            "Leave Request Approved",
            f"Your {req.leave_type.value} leave request has been approved",
            "/leaves",
        )
        return self.get(req.request_id)

    def reject(self, request_id: int, reviewer_id: int, comments: Optional[str] = None) -> LeaveRequest:
        req = self._pending(request_id)

        ok = self._requests.reject(
            request_id=req.request_id,
            reviewed_by=int(reviewer_id),
            reviewed_at=self._clock.now(),
            comments=(comments or "").strip() or "Rejected",
        )
        if not ok:
            raise AlreadyProcessedError("Leave request already processed")

        logger.info("Leave request %s rejected by %s", req.request_id, reviewer_id)
        send_quietly(
            self._notifier,
            req.employee_id,
            NotificationKind.LEAVE_REJECTED,
            "Leave Request Rejected",
            f"Your {req.leave_type.value} leave request has been rejected",
            "/leaves",
        )
        return self.get(req.request_id)

    def delete(self, request_id: int, requester_id: int, requester_role: Role | str = Role.EMPLOYEE) -> None:
        """Remove a request in any state; the owner or an HR/admin reviewer may do so.

        The balance charged by an approved request is not restored.
        """
        req = self.get(request_id)
        role = require_choice(requester_role, Role, "Role")
        if int(requester_id) != req.employee_id and role not in REVIEWER_ROLES:
            raise AuthorizationError("Not authorized to delete this leave request")

        if req.status == LeaveStatus.APPROVED:
            logger.warning(
                "Deleting approved leave request %s; %s day(s) stay charged to employee %s",
                req.request_id,
                req.days,
                req.employee_id,
            )
        if not self._requests.delete_by_id(req.request_id):
            raise NotFoundError("Leave request not found")
        logger.info("Leave request %s deleted by %s", req.request_id, requester_id)
