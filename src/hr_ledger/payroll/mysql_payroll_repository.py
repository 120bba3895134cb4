from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from ..employees.model import Allowances, Deductions
from .model import PayPeriod, PayrollBreakdown, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, period_year, period_month, base_salary,
    house_rent, medical, transport, special, total_allowances, gross_salary,
    provident_fund, professional_tax, income_tax, other_deduction, total_deductions,
    net_salary, status, pay_date
"""


def _row_to_record(r: dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        period=PayPeriod(year=int(r["period_year"]), month=int(r["period_month"])),
        breakdown=PayrollBreakdown(
            base_salary=to_decimal(r["base_salary"]),
            allowances=Allowances(
                house_rent=to_decimal(r["house_rent"]),
                medical=to_decimal(r["medical"]),
                transport=to_decimal(r["transport"]),
                special=to_decimal(r["special"]),
            ),
            deductions=Deductions(
                provident_fund=to_decimal(r["provident_fund"]),
                professional_tax=to_decimal(r["professional_tax"]),
                income_tax=to_decimal(r["income_tax"]),
                other=to_decimal(r["other_deduction"]),
            ),
            total_allowances=to_decimal(r["total_allowances"]),
            gross_salary=to_decimal(r["gross_salary"]),
            total_deductions=to_decimal(r["total_deductions"]),
            net_salary=to_decimal(r["net_salary"]),
        ),
        status=PayrollStatus(r["status"]),
        pay_date=r.get("pay_date"),
    )


def _amount_params(b: PayrollBreakdown) -> tuple:
    a, d = b.allowances, b.deductions
    return (
        b.base_salary,
        a.house_rent,
        a.medical,
        a.transport,
        a.special,
        b.total_allowances,
        b.gross_salary,
        d.provident_fund,
        d.professional_tax,
        d.income_tax,
        d.other,
        b.total_deductions,
        b.net_salary,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_period(self, employee_id: int, period: PayPeriod) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE employee_id=%s AND period_year=%s AND period_month=%s
                """,
                (int(employee_id), period.year, period.month),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        period: Optional[PayPeriod] = None,
        limit: int = 500,
    ) -> Sequence[PayrollRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if period is not None:
            clauses.append("period_year=%s AND period_month=%s")
            params += [period.year, period.month]

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {where}
                ORDER BY period_year DESC, period_month DESC, employee_id ASC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_record(self, *, employee_id: int, period: PayPeriod, breakdown: PayrollBreakdown) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    employee_id, period_year, period_month, base_salary,
                    house_rent, medical, transport, special, total_allowances, gross_salary,
                    provident_fund, professional_tax, income_tax, other_deduction, total_deductions,
                    net_salary, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    period.year,
                    period.month,
                    *_amount_params(breakdown),
                    PayrollStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def update_amounts(self, *, payroll_id: int, breakdown: PayrollBreakdown) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET base_salary=%s,
                    house_rent=%s, medical=%s, transport=%s, special=%s, total_allowances=%s, gross_salary=%s,
                    provident_fund=%s, professional_tax=%s, income_tax=%s, other_deduction=%s, total_deductions=%s,
                    net_salary=%s
                WHERE payroll_id=%s AND status=%s
                """,
                (*_amount_params(breakdown), int(payroll_id), PayrollStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def mark_paid(self, *, payroll_id: int, pay_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status=%s, pay_date=%s
                WHERE payroll_id=%s AND status=%s
                """,
                (PayrollStatus.PAID.value, pay_date, int(payroll_id), PayrollStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_by_id(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0
