from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import InsufficientBalanceError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, days, reason,
    status, applied_at, reviewed_by, reviewed_at, comments
"""

_BALANCE_COLUMN = {
    LeaveType.PAID: "leave_paid",
    LeaveType.SICK: "leave_sick",
    LeaveType.UNPAID: "leave_unpaid",
}


def _row_to_request(r: dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_at=r["applied_at"],
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        comments=r.get("comments"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(LeaveStatus(status).value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY applied_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status, applied_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(days),
                    reason,
                    LeaveStatus.PENDING.value,
                    applied_at,
                ),
            )
            return int(cur.lastrowid)

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
        column = _BALANCE_COLUMN[LeaveType(leave_type)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, comments=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.APPROVED.value,
                    int(reviewed_by),
                    reviewed_at,
                    comments,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                return False

            guard = f" AND {column} >= %s AND leave_remaining >= %s" if require_sufficient else ""
            params: list[object] = [int(days), int(days), int(days), int(employee_id)]
            if require_sufficient:
                params += [int(days), int(days)]
            cur.execute(
                f"""
                UPDATE employees
                SET {column}={column}-%s, leave_used=leave_used+%s, leave_remaining=leave_remaining-%s
                WHERE employee_id=%s{guard}
                """,
                tuple(params),
            )
            if cur.rowcount == 0:
                # Raising rolls back the status change above.
                if require_sufficient:
                    raise InsufficientBalanceError(f"Insufficient {LeaveType(leave_type).value} leave balance")
                raise NotFoundError("Employee not found")
            return True

    def reject(
        self,
        *,
        request_id: int,
        reviewed_by: int,
        reviewed_at: datetime,
        comments: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, comments=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.REJECTED.value,
                    int(reviewed_by),
                    reviewed_at,
                    comments,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0
