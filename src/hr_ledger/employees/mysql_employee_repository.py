from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Allowances, Deductions, Employee, LeaveBalance, SalaryStructure
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, email, full_name, role, status, department, position, join_date,
    base_salary, house_rent, medical, transport, special,
    provident_fund, professional_tax, income_tax, other_deduction,
    leave_paid, leave_sick, leave_unpaid, leave_total, leave_used, leave_remaining
"""


def row_to_employee(r: dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        email=r["email"],
        full_name=r["full_name"],
        role=Role(r["role"]),
        status=EmployeeStatus(r["status"]),
        department=r.get("department") or "General",
        position=r.get("position") or "Employee",
        join_date=r.get("join_date"),
        salary=SalaryStructure(
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
        ),
        leave_balance=LeaveBalance(
            paid=int(r["leave_paid"]),
            sick=int(r["leave_sick"]),
            unpaid=int(r["leave_unpaid"]),
            total=int(r["leave_total"]),
            used=int(r["leave_used"]),
            remaining=int(r["leave_remaining"]),
        ),
    )


def _salary_params(salary: SalaryStructure) -> tuple:
    a, d = salary.allowances, salary.deductions
    return (
        salary.base_salary,
        a.house_rent,
        a.medical,
        a.transport,
        a.special,
        d.provident_fund,
        d.professional_tax,
        d.income_tax,
        d.other,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s", (employee_code,))
            r = fetchone(cur)
            return row_to_employee(r) if r else None

    def list_by_status(self, status: EmployeeStatus) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE status=%s ORDER BY employee_id ASC",
                (EmployeeStatus(status).value,),
            )
            return [row_to_employee(r) for r in fetchall(cur)]

    def create_employee(
        self,
        *,
        employee_code: str,
        email: str,
        full_name: str,
        role: Role,
        status: EmployeeStatus,
        department: str,
        position: str,
        join_date: Optional[date],
        salary: SalaryStructure,
        leave_balance: LeaveBalance,
    ) -> int:
        b = leave_balance
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_code, email, full_name, role, status, department, position, join_date,
                    base_salary, house_rent, medical, transport, special,
                    provident_fund, professional_tax, income_tax, other_deduction,
                    leave_paid, leave_sick, leave_unpaid, leave_total, leave_used, leave_remaining
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee_code,
                    email,
                    full_name,
                    role.value,
                    status.value,
                    department,
                    position,
                    join_date,
                    *_salary_params(salary),
                    b.paid,
                    b.sick,
                    b.unpaid,
                    b.total,
                    b.used,
                    b.remaining,
                ),
            )
            return int(cur.lastrowid)

    def update_salary_structure(self, *, employee_id: int, salary: SalaryStructure) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET base_salary=%s, house_rent=%s, medical=%s, transport=%s, special=%s,
                    provident_fund=%s, professional_tax=%s, income_tax=%s, other_deduction=%s
                WHERE employee_id=%s
                """,
                (*_salary_params(salary), int(employee_id)),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: int, *, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET status=%s WHERE employee_id=%s",
                (EmployeeStatus(status).value, int(employee_id)),
            )
            return cur.rowcount > 0
