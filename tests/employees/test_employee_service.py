from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hr_ledger.core.enums import EmployeeStatus, Role
from hr_ledger.core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from hr_ledger.employees.service import EmployeeService


@pytest.fixture
def service(employees, clock):
    return EmployeeService(employees, clock=clock)


def _hire(service, code="EMP100", email="jane@example.com", **kwargs):
    return service.hire(employee_code=code, email=email, full_name="Jane Doe", **kwargs)


def test_hire_sets_defaults(service):
    employee = service.get(_hire(service, email="Jane@Example.com", base_salary=60000))

    assert employee.email == "jane@example.com"
    assert employee.role == Role.EMPLOYEE
    assert employee.status == EmployeeStatus.ACTIVE
    assert employee.join_date == date(2025, 6, 10)
    assert employee.salary.allowances.house_rent == Decimal("12000")
    assert employee.leave_balance.paid == 12
    assert employee.leave_balance.remaining == employee.leave_balance.total


def test_hire_rejects_bad_input(service):
    with pytest.raises(ValidationError):
        _hire(service, code="X1")
    with pytest.raises(ValidationError):
        _hire(service, email="not-an-email")
    with pytest.raises(ValidationError):
        _hire(service, role="ceo")
    with pytest.raises(ValidationError):
        _hire(service, base_salary=-1)


def test_hire_duplicates(service):
    _hire(service)
    with pytest.raises(DuplicateRecordError):
        _hire(service, email="other@example.com")
    with pytest.raises(DuplicateRecordError):
        _hire(service, code="EMP101")


def test_change_base_salary_rederives_categories(service):
    employee_id = _hire(service)
    service.override_salary_components(employee_id, deductions={"other": 300})

    salary = service.change_base_salary(employee_id, "80000")
    assert salary.base_salary == Decimal("80000")
    assert salary.allowances.house_rent == Decimal("16000")
    assert salary.deductions.provident_fund == Decimal("9600")
    assert salary.deductions.other == Decimal("300")
    assert service.get(employee_id).salary == salary


def test_override_requires_something(service):
    employee_id = _hire(service)
    with pytest.raises(ValidationError):
        service.override_salary_components(employee_id)


def test_deactivate_removes_from_active_list(service):
    a = _hire(service)
    b = _hire(service, code="EMP101", email="b@example.com")

    service.deactivate(a)
    assert [e.employee_id for e in service.list_active()] == [b]
    assert service.get(a).status == EmployeeStatus.INACTIVE

    with pytest.raises(NotFoundError):
        service.deactivate(999)
