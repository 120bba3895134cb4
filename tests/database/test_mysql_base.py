from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import mysql.connector
import pytest
from mysql.connector import errorcode

from hr_ledger.core.exceptions import DuplicateKeyError
from hr_ledger.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from hr_ledger.database.mysql_base import db_cursor, normalize_mysql_time, to_decimal


class FakeCursor:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self):
        self.cursor_obj = FakeCursor()
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self):
        self.conn = FakeConnection()

    def connect(self, *, with_database=True):
        return self.conn


def test_db_cursor_commits_on_success():
    factory = FakeFactory()
    with db_cursor(factory) as (conn, cur):
        assert cur is factory.conn.cursor_obj

    assert factory.conn.committed
    assert not factory.conn.rolled_back
    assert factory.conn.closed and cur.closed


def test_db_cursor_rolls_back_and_reraises():
    factory = FakeFactory()
    with pytest.raises(RuntimeError):
        with db_cursor(factory):
            raise RuntimeError("boom")

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_duplicate_entry_becomes_duplicate_key_error():
    factory = FakeFactory()
    with pytest.raises(DuplicateKeyError):
        with db_cursor(factory):
            raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    assert factory.conn.rolled_back


def test_other_integrity_errors_pass_through():
    factory = FakeFactory()
    with pytest.raises(mysql.connector.IntegrityError):
        with db_cursor(factory):
            raise mysql.connector.IntegrityError(msg="FK", errno=errorcode.ER_NO_REFERENCED_ROW_2)


def test_normalize_mysql_time():
    assert normalize_mysql_time(None) is None
    assert normalize_mysql_time(time(8, 30)) == time(8, 30)
    assert normalize_mysql_time(timedelta(hours=17, minutes=45)) == time(17, 45)
    assert normalize_mysql_time("09:05:00") == time(9, 5)


def test_to_decimal():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(12.5) == Decimal("12.5")


def test_iter_sql_statements_respects_quotes():
    sql = "CREATE TABLE a (x INT);\nINSERT INTO a VALUES (';');\n"
    assert list(iter_sql_statements(sql)) == ["CREATE TABLE a (x INT)", "INSERT INTO a VALUES (';')"]


def test_strip_create_db_and_use():
    sql = "CREATE DATABASE IF NOT EXISTS foo;\nUSE foo;\nCREATE TABLE t (id INT);\n"
    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]
