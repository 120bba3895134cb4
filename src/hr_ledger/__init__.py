"""HR ledger package.

Organized by feature modules (employees, attendance, leave, payroll) with
service/repository layers over a MySQL store.
"""
