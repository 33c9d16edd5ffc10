from __future__ import annotations

import mysql.connector
import pytest

from office_register.core.exceptions import ConflictError, StoreError
from office_register.database.bootstrap import _strip_create_db_and_use, iter_sql_statements
from office_register.database.mysql_base import db_cursor


class FakeCursor:
    def __init__(self, error=None):
        self.error = error
        self.closed = False

    def execute(self, sql, params=None):
        if self.error:
            raise self.error

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self, error=None):
        self.cur = FakeCursor(error)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def test_success_commits_and_closes():
    conn = FakeConn()
    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed and conn.cur.closed
    assert not conn.rolled_back


def test_duplicate_key_becomes_conflict():
    conn = FakeConn(error=mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062))

    with pytest.raises(ConflictError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")

    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_other_integrity_error_becomes_store_error():
    conn = FakeConn(error=mysql.connector.IntegrityError(msg="FK fails", errno=1452))

    with pytest.raises(StoreError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")


def test_driver_error_becomes_store_error():
    conn = FakeConn(error=mysql.connector.OperationalError(msg="lost connection", errno=2013))

    with pytest.raises(StoreError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("SELECT 1")

    assert conn.closed


def test_connect_failure_becomes_store_error():
    factory = FakeFactory(connect_error=mysql.connector.InterfaceError(msg="can't connect", errno=2003))

    with pytest.raises(StoreError) as exc:
        with db_cursor(factory):
            pass

    assert exc.value.message == "Database is unavailable, please try again"


def test_schema_splitter_handles_quotes_and_strips_database_lines():
    sql = """
    CREATE DATABASE IF NOT EXISTS office_register;
    USE office_register;
    CREATE TABLE a (note VARCHAR(20) DEFAULT 'x;y');
    INSERT INTO a VALUES ('it''s');
    """

    statements = list(iter_sql_statements(_strip_create_db_and_use(sql)))

    assert len(statements) == 2
    assert statements[0].startswith("CREATE TABLE a")
    assert "'x;y'" in statements[0]
