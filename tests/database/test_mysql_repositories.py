from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal

import pytest

from fake_mysql import ScriptedCursor, ScriptedFactory
from hr_ledger.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from hr_ledger.core.enums import AttendanceStatus, LeaveType, NotificationKind, PayrollStatus
from hr_ledger.core.exceptions import InsufficientBalanceError, NotFoundError
from hr_ledger.employees.salary import recalculate_salary_structure
from hr_ledger.leave.mysql_leave_repository import MySQLLeaveRepository
from hr_ledger.notifications.notifier import MySQLNotifier, send_quietly
from hr_ledger.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hr_ledger.payroll.model import PayPeriod
from hr_ledger.payroll.mysql_payroll_repository import MySQLPayrollRepository

NOW = datetime(2025, 6, 10, 10, 0)


def _approve(repo, **kwargs):
    params = dict(
        request_id=7,
        reviewed_by=2,
        reviewed_at=NOW,
        comments="Approved",
        employee_id=1,
        leave_type=LeaveType.SICK,
        days=3,
    )
    params.update(kwargs)
    return repo.approve_and_charge(**params)


def test_approve_and_charge_runs_both_updates_in_one_transaction():
    cur = ScriptedCursor(rowcounts=[1, 1])
    factory = ScriptedFactory(cur)

    assert _approve(MySQLLeaveRepository(factory)) is True

    (status_sql, status_params), (balance_sql, balance_params) = cur.executed
    assert "status=%s" in status_sql and status_params[-1] == "pending"
    assert "leave_sick=leave_sick-%s" in balance_sql
    assert "leave_remaining=leave_remaining-%s" in balance_sql
    assert balance_params == (3, 3, 3, 1)
    assert factory.conn.commits == 1 and factory.conn.rollbacks == 0


def test_approve_and_charge_skips_balance_when_not_pending():
    cur = ScriptedCursor(rowcounts=[0])
    factory = ScriptedFactory(cur)

    assert _approve(MySQLLeaveRepository(factory)) is False
    assert len(cur.executed) == 1


def test_strict_charge_shortfall_rolls_back_status_change():
    cur = ScriptedCursor(rowcounts=[1, 0])
    factory = ScriptedFactory(cur)

    with pytest.raises(InsufficientBalanceError):
        _approve(MySQLLeaveRepository(factory), require_sufficient=True)

    balance_sql, balance_params = cur.executed[1]
    assert "leave_sick >= %s AND leave_remaining >= %s" in balance_sql
    assert balance_params == (3, 3, 3, 1, 3, 3)
    assert factory.conn.rollbacks == 1 and factory.conn.commits == 0


def test_missing_employee_rolls_back_approval():
    cur = ScriptedCursor(rowcounts=[1, 0])
    factory = ScriptedFactory(cur)

    with pytest.raises(NotFoundError):
        _approve(MySQLLeaveRepository(factory))
    assert factory.conn.rollbacks == 1


def test_check_out_update_is_guarded():
    cur = ScriptedCursor(rowcounts=[0])
    repo = MySQLAttendanceRepository(ScriptedFactory(cur))

    ok = repo.set_check_out(attendance_id=5, check_out=time(17, 0), hours=8.0, status=AttendanceStatus.PRESENT)
    assert ok is False
    assert "check_out IS NULL" in cur.executed[0][0]


def test_payroll_row_mapping_and_guards():
    breakdown = StandardPayrollCalculator().compute(recalculate_salary_structure(Decimal("50000")))
    row = {
        "payroll_id": 3,
        "employee_id": 1,
        "period_year": 2025,
        "period_month": 6,
        "base_salary": Decimal("50000.00"),
        "house_rent": Decimal("10000.00"),
        "medical": Decimal("3350.00"),
        "transport": Decimal("2000.00"),
        "special": Decimal("1350.00"),
        "total_allowances": breakdown.total_allowances,
        "gross_salary": breakdown.gross_salary,
        "provident_fund": Decimal("6000.00"),
        "professional_tax": Decimal("200.00"),
        "income_tax": Decimal("5000.00"),
        "other_deduction": Decimal("0.00"),
        "total_deductions": breakdown.total_deductions,
        "net_salary": breakdown.net_salary,
        "status": "pending",
        "pay_date": None,
    }
    cur = ScriptedCursor(rowcounts=[1, 0], rows=[row])
    repo = MySQLPayrollRepository(ScriptedFactory(cur))

    rec = repo.get_for_employee_and_period(1, PayPeriod(2025, 6))
    assert rec.period == PayPeriod(2025, 6)
    assert rec.status == PayrollStatus.PENDING
    assert rec.net_salary == Decimal("55500")
    assert rec.breakdown.allowances.medical == Decimal("3350")

    assert repo.mark_paid(payroll_id=3, pay_date=NOW) is False
    sql, params = cur.executed[-1]
    assert "WHERE payroll_id=%s AND status=%s" in sql
    assert params == ("paid", NOW, 3, "pending")


def test_notifier_stores_unread_row():
    cur = ScriptedCursor()
    MySQLNotifier(ScriptedFactory(cur)).notify(4, NotificationKind.LEAVE_PENDING, "New Leave", "Pending review", "/leaves")

    sql, params = cur.executed[0]
    assert sql.startswith("INSERT INTO notifications")
    assert params == (4, "leave_pending", "New Leave", "Pending review", "/leaves")


def test_send_quietly_without_notifier_is_noop():
    send_quietly(None, 1, NotificationKind.SYSTEM, "t", "m")
