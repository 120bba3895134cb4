from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceLedger
from .common.clock import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.service import LeaveLedger
from .notifications.notifier import MySQLNotifier, Notifier
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollEngine


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    attendance_repo: MySQLAttendanceRepository
    leave_repo: MySQLLeaveRepository
    payroll_repo: MySQLPayrollRepository
    notifier: Notifier

    employee_service: EmployeeService
    attendance_ledger: AttendanceLedger
    leave_ledger: LeaveLedger
    payroll_engine: PayrollEngine


def build_container(
    *,
    db_config: dict,
    strict: bool = False,
    clock: Optional[Clock] = None,
    notifier: Optional[Notifier] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = clock or SystemClock()

    employees_repo = MySQLEmployeeRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leave_repo = MySQLLeaveRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    notifier = notifier or MySQLNotifier(conn)

    employee_service = EmployeeService(employees_repo, clock=clock)
    attendance_ledger = AttendanceLedger(attendance_repo, employees_repo, clock=clock, strict=strict)
    leave_ledger = LeaveLedger(leave_repo, employees_repo, notifier=notifier, clock=clock, strict=strict)
    payroll_engine = PayrollEngine(payroll_repo, employees_repo, notifier=notifier, clock=clock)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        notifier=notifier,
        employee_service=employee_service,
        attendance_ledger=attendance_ledger,
        leave_ledger=leave_ledger,
        payroll_engine=payroll_engine,
    )
