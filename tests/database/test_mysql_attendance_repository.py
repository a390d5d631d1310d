from __future__ import annotations

from datetime import date, datetime, timezone

import mysql.connector
import pytest
from mysql.connector import errorcode

from class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from class_attendance.attendance.model import RecordFilter
from class_attendance.core.enums import AttendanceStatus
from class_attendance.core.exceptions import DuplicateRecordError, StoreError


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = 0
        self.rowcount = 0

    def execute(self, sql, params=None):
        self._conn.statements.append((" ".join(sql.split()), params))
        if self._conn.error and not sql.startswith("SET SESSION"):
            raise self._conn.error
        self.lastrowid = 41
        self.rowcount = self._conn.rowcount

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        pass


class FakeConnection:
    def __init__(self, error=None, rowcount=1):
        self.error = error
        self.rowcount = rowcount
        self.statements = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn):
        self.conn = conn
        self.timeouts = []

    def resolve_timeout(self, timeout):
        return timeout if timeout is not None else 5.0

    def connect(self, *, timeout=None):
        self.timeouts.append(timeout)
        return self.conn


def _insert(repo, **kwargs):
    return repo.insert_checkin(
        student_id=1,
        session_id=100,
        attendance_date=date(2026, 3, 2),
        check_in_time=datetime(2026, 3, 2, 9, 5, tzinfo=timezone.utc),
        status=AttendanceStatus.PRESENT,
        score=1.0,
        **kwargs,
    )


def test_insert_stores_naive_utc_and_commits():
    conn = FakeConnection()
    record = _insert(MySQLAttendanceRepository(FakeConnFactory(conn)), timeout=2.0)

    assert record.attendance_id == 41
    assert conn.committed and conn.closed
    assert conn.statements[0] == ("SET SESSION MAX_EXECUTION_TIME=%s", (2000,))
    assert conn.statements[1][1][3] == datetime(2026, 3, 2, 9, 5)


def test_duplicate_key_maps_to_duplicate_record_error():
    err = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    conn = FakeConnection(error=err)

    with pytest.raises(DuplicateRecordError):
        _insert(MySQLAttendanceRepository(FakeConnFactory(conn)))

    assert conn.rolled_back and conn.closed


def test_driver_errors_map_to_store_error():
    conn = FakeConnection(error=mysql.connector.OperationalError(msg="Query execution was interrupted"))

    with pytest.raises(StoreError) as exc:
        _insert(MySQLAttendanceRepository(FakeConnFactory(conn)))

    assert not isinstance(exc.value, DuplicateRecordError)


def test_checkout_update_is_conditional():
    conn = FakeConnection(rowcount=0)
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    updated = repo.update_checkout(attendance_id=41, check_out_time=datetime(2026, 3, 2, 10, 5, tzinfo=timezone.utc))

    assert updated is False
    assert "check_out_time IS NULL" in conn.statements[1][0]


def test_query_with_empty_session_ids_skips_the_store():
    conn = FakeConnection()
    factory = FakeConnFactory(conn)

    assert MySQLAttendanceRepository(factory).query(RecordFilter(session_ids=())) == []
    assert factory.timeouts == []


class DeadConnection(FakeConnection):
    """Connection dropped mid-query: every further call on it fails."""

    def rollback(self):
        raise mysql.connector.OperationalError(msg="MySQL Connection not available", errno=2055)

    def close(self):
        raise mysql.connector.OperationalError(msg="MySQL Connection not available", errno=2055)


def test_store_error_survives_a_dead_connection():
    conn = DeadConnection(error=mysql.connector.OperationalError(msg="Lost connection during query", errno=2013))

    with pytest.raises(StoreError) as exc:
        _insert(MySQLAttendanceRepository(FakeConnFactory(conn)))

    assert "Lost connection" in exc.value.message


def test_duplicate_is_reported_even_if_rollback_fails():
    conn = DeadConnection(error=mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(DuplicateRecordError):
        _insert(MySQLAttendanceRepository(FakeConnFactory(conn)))
