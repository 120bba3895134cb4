from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from hr_ledger.attendance.model import AttendanceRecord
from hr_ledger.core.enums import AttendanceStatus, EmployeeStatus, LeaveStatus, LeaveType, PayrollStatus, Role
from hr_ledger.core.exceptions import DuplicateKeyError, InsufficientBalanceError, NotFoundError
from hr_ledger.employees.model import Employee, LeaveBalance, SalaryStructure
from hr_ledger.employees.salary import recalculate_salary_structure
from hr_ledger.employees.service import default_leave_balance
from hr_ledger.leave.model import LeaveRequest
from hr_ledger.payroll.model import PayPeriod, PayrollBreakdown, PayrollRecord


class FixedClock:
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


class InMemoryEmployees:
    def __init__(self):
        self.by_id: dict[int, Employee] = {}
        self._id = 0

    def add(
        self,
        *,
        code: Optional[str] = None,
        base_salary: Decimal | int = 50000,
        salary: Optional[SalaryStructure] = None,
        leave_balance: Optional[LeaveBalance] = None,
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
        role: Role = Role.EMPLOYEE,
    ) -> Employee:
        self._id += 1
        employee = Employee(
            employee_id=self._id,
            employee_code=code or f"EMP{self._id:03d}",
            email=f"emp{self._id}@example.com",
            full_name=f"Employee {self._id}",
            role=role,
            status=status,
            salary=salary or recalculate_salary_structure(Decimal(base_salary)),
            leave_balance=leave_balance or default_leave_balance(),
        )
        self.by_id[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.employee_code == employee_code), None)

    def list_by_status(self, status: EmployeeStatus):
        return [e for e in sorted(self.by_id.values(), key=lambda e: e.employee_id) if e.status == status]

    def create_employee(self, *, employee_code, email, full_name, role, status, department, position, join_date, salary, leave_balance) -> int:
        if any(e.employee_code == employee_code or e.email == email for e in self.by_id.values()):
            raise DuplicateKeyError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = Employee(
            employee_id=self._id,
            employee_code=employee_code,
            email=email,
            full_name=full_name,
            role=role,
            status=status,
            salary=salary,
            leave_balance=leave_balance,
            department=department,
            position=position,
            join_date=join_date,
        )
        return self._id

    def update_salary_structure(self, *, employee_id: int, salary: SalaryStructure) -> bool:
        employee = self.by_id.get(employee_id)
        if not employee:
            return False
        self.by_id[employee_id] = replace(employee, salary=salary)
        return True

    def set_status(self, employee_id: int, *, status: EmployeeStatus) -> bool:
        employee = self.by_id.get(employee_id)
        if not employee:
            return False
        self.by_id[employee_id] = replace(employee, status=status)
        return True


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.by_id.get(attendance_id)

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.by_id.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def list_for_employee(self, employee_id: int, *, start_date=None, end_date=None, limit: int = 31):
        items = [
            r
            for r in self.by_id.values()
            if r.employee_id == employee_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def create_record(self, *, employee_id, work_date, check_in, check_out, hours, status, remarks=None) -> int:
        if self.get_for_employee_and_date(employee_id, work_date):
            raise DuplicateKeyError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            hours=hours,
            status=status,
            remarks=remarks,
        )
        return self._id

    def set_check_in(self, *, attendance_id: int, check_in: time, hours: float, status: AttendanceStatus) -> bool:
        rec = self.by_id.get(attendance_id)
        if not rec or rec.check_in is not None:
            return False
        self.by_id[attendance_id] = replace(rec, check_in=check_in, hours=hours, status=status)
        return True

    def set_check_out(self, *, attendance_id: int, check_out: time, hours: float, status: AttendanceStatus) -> bool:
        rec = self.by_id.get(attendance_id)
        if not rec or rec.check_out is not None:
            return False
        self.by_id[attendance_id] = replace(rec, check_out=check_out, hours=hours, status=status)
        return True

    def admin_update_record(self, *, attendance_id, check_in, check_out, hours, status, remarks=None) -> bool:
        rec = self.by_id.get(attendance_id)
        if not rec:
            return False
        self.by_id[attendance_id] = replace(
            rec, check_in=check_in, check_out=check_out, hours=hours, status=status, remarks=remarks
        )
        return True

    def delete_by_id(self, attendance_id: int) -> bool:
        return self.by_id.pop(attendance_id, None) is not None


class InMemoryLeave:
    """Approval and balance charge succeed or fail together, as in one transaction."""

    def __init__(self, employees: InMemoryEmployees):
        self.employees = employees
        self.by_id: dict[int, LeaveRequest] = {}
        self._id = 0

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        return self.by_id.get(request_id)

    def list_requests(self, *, employee_id=None, status=None, limit: int = 200):
        items = [
            r
            for r in self.by_id.values()
            if (employee_id is None or r.employee_id == employee_id) and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: r.applied_at, reverse=True)
        return items[:limit]

    def create_leave(self, *, employee_id, leave_type, start_date, end_date, days, reason, applied_at) -> int:
        self._id += 1
        self.by_id[self._id] = LeaveRequest(
            request_id=self._id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
            status=LeaveStatus.PENDING,
            applied_at=applied_at,
        )
        return self._id

    def approve_and_charge(
        self, *, request_id, reviewed_by, reviewed_at, comments, employee_id, leave_type, days, require_sufficient=False
    ) -> bool:
        req = self.by_id.get(request_id)
        if not req or req.status != LeaveStatus.PENDING:
            return False
        employee = self.employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        balance = employee.leave_balance
        if require_sufficient and (balance.for_type(leave_type) < days or balance.remaining < days):
            raise InsufficientBalanceError("Insufficient leave balance")

        self.employees.by_id[employee_id] = replace(employee, leave_balance=balance.charged(leave_type, days))
        self.by_id[request_id] = replace(
            req, status=LeaveStatus.APPROVED, reviewed_by=reviewed_by, reviewed_at=reviewed_at, comments=comments
        )
        return True

    def reject(self, *, request_id, reviewed_by, reviewed_at, comments) -> bool:
        req = self.by_id.get(request_id)
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.by_id[request_id] = replace(
            req, status=LeaveStatus.REJECTED, reviewed_by=reviewed_by, reviewed_at=reviewed_at, comments=comments
        )
        return True

    def delete_by_id(self, request_id: int) -> bool:
        return self.by_id.pop(request_id, None) is not None


class InMemoryPayroll:
    def __init__(self):
        self.by_id: dict[int, PayrollRecord] = {}
        self._id = 0

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self.by_id.get(payroll_id)

    def get_for_employee_and_period(self, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        return next(
            (r for r in self.by_id.values() if r.employee_id == employee_id and r.period == period),
            None,
        )

    def list_records(self, *, employee_id=None, period=None, limit: int = 500):
        items = [
            r
            for r in self.by_id.values()
            if (employee_id is None or r.employee_id == employee_id) and (period is None or r.period == period)
        ]
        items.sort(key=lambda r: (r.period, -r.employee_id), reverse=True)
        return items[:limit]

    def create_record(self, *, employee_id: int, period: PayPeriod, breakdown: PayrollBreakdown) -> int:
        if self.get_for_employee_and_period(employee_id, period):
            raise DuplicateKeyError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = PayrollRecord(
            payroll_id=self._id,
            employee_id=employee_id,
            period=period,
            breakdown=breakdown,
        )
        return self._id

    def update_amounts(self, *, payroll_id: int, breakdown: PayrollBreakdown) -> bool:
        rec = self.by_id.get(payroll_id)
        if not rec or rec.status != PayrollStatus.PENDING:
            return False
        self.by_id[payroll_id] = replace(rec, breakdown=breakdown)
        return True

    def mark_paid(self, *, payroll_id: int, pay_date: datetime) -> bool:
        rec = self.by_id.get(payroll_id)
        if not rec or rec.status != PayrollStatus.PENDING:
            return False
        self.by_id[payroll_id] = replace(rec, status=PayrollStatus.PAID, pay_date=pay_date)
        return True

    def delete_by_id(self, payroll_id: int) -> bool:
        return self.by_id.pop(payroll_id, None) is not None


class RecordingNotifier:
    def __init__(self):
        self.sent: list[dict] = []

    def notify(self, user_id, kind, title, message, link=None) -> None:
        self.sent.append({"user_id": user_id, "kind": kind, "title": title, "message": message, "link": link})


class BrokenNotifier:
    def notify(self, user_id, kind, title, message, link=None) -> None:
        raise ConnectionError("notification store unavailable")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 6, 10, 9, 0))


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def leave_requests(employees) -> InMemoryLeave:
    return InMemoryLeave(employees)


@pytest.fixture
def payroll() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def broken_notifier() -> BrokenNotifier:
    return BrokenNotifier()
