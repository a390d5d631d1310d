from __future__ import annotations

from datetime import datetime, timezone

from class_attendance.sessions.mysql_session_repository import MySQLSessionRepository


class FakeCursor:
    def __init__(self, rows):
        self._rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append(params)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, rows):
        self._cursor = FakeCursor(rows)

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, rows):
        self.conn = FakeConnection(rows)

    def resolve_timeout(self, timeout):
        return 5.0

    def connect(self, *, timeout=None):
        return self.conn


def _row(**overrides):
    row = {
        "session_id": 100,
        "class_id": 10,
        "session_name": "Algorithms",
        "teacher_id": 7,
        "latitude": "11.55",
        "longitude": "104.93",
        "radius_meters": 80,
        "start_time": datetime(2026, 3, 2, 9, 0),
        "end_time": datetime(2026, 3, 2, 10, 0),
    }
    row.update(overrides)
    return row


def test_row_maps_text_coordinates_and_naive_datetimes():
    session = MySQLSessionRepository(FakeConnFactory([_row()])).get_by_id(100)

    assert session.geofence.center.latitude == 11.55
    assert session.geofence.center.longitude == 104.93
    assert session.geofence.radius_meters == 80
    assert session.start_time == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
    assert session.end_time.tzinfo is not None


def test_blank_location_means_no_geofence():
    repo = MySQLSessionRepository(FakeConnFactory([_row(latitude=""), _row(session_id=101, longitude=None)]))

    sessions = repo.list_for_classes(class_ids=[10])

    assert [s.geofence for s in sessions] == [None, None]


def test_missing_radius_uses_default():
    session = MySQLSessionRepository(FakeConnFactory([_row(radius_meters=None)])).get_by_id(100)

    assert session.geofence.radius_meters == 100


def test_unscheduled_session_has_no_times():
    session = MySQLSessionRepository(FakeConnFactory([_row(start_time=None, end_time=None)])).get_by_id(100)

    assert session.start_time is None
    assert session.is_scheduled is False


def test_missing_session():
    assert MySQLSessionRepository(FakeConnFactory([])).get_by_id(999) is None


def test_range_query_sends_naive_utc_bounds():
    factory = FakeConnFactory([])
    start = datetime(2026, 3, 1, tzinfo=timezone.utc)
    end = datetime(2026, 4, 1, tzinfo=timezone.utc)

    MySQLSessionRepository(factory).list_in_range(class_ids=[10, 11], start=start, end=end)

    assert factory.conn._cursor.executed[-1] == (10, 11, datetime(2026, 3, 1), datetime(2026, 4, 1))
