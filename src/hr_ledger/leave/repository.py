from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    """Storage contract for leave requests.

    Decisions only apply to a request that is still pending; they return False
    when another reviewer got there first.
    """

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def create_leave(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
        applied_at: datetime,
    ) -> int:
        raise NotImplementedError

    def approve_and_charge(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        reviewed_at: datetime,
        comments: Optional[str],
        employee_id: int,
        leave_type: LeaveType,
        days: int,
        require_sufficient: bool = False,
    ) -> bool:
        """Mark approved and charge the employee's balance in one transaction.

        With `require_sufficient`, raises InsufficientBalanceError (and changes
        nothing) when the category balance or `remaining` is below `days`.
        """

        raise NotImplementedError

    def reject(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        reviewed_at: datetime,
        comments: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
