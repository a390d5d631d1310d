from __future__ import annotations

import pytest

from class_attendance.attendance.service import AttendanceService
from class_attendance.enrollments.model import Enrollment
from class_attendance.geo.model import Geofence, GeoPoint
from class_attendance.sessions.model import Session

from fakes import (
    CAMPUS,
    CLASS_ID,
    SESSION_ID,
    STUDENT_ID,
    InMemoryAttendance,
    InMemoryEnrollments,
    InMemorySessions,
    utc,
)


@pytest.fixture
def fixed_now():
    return utc(2026, 3, 2, 9, 5)


@pytest.fixture
def session():
    return Session(
        session_id=SESSION_ID,
        class_id=CLASS_ID,
        name="Algorithms",
        teacher_id=7,
        start_time=utc(2026, 3, 2, 9, 0),
        end_time=utc(2026, 3, 2, 10, 0),
        geofence=Geofence(center=GeoPoint(*CAMPUS), radius_meters=100),
    )


@pytest.fixture
def sessions_repo(session):
    repo = InMemorySessions()
    repo.add(session)
    return repo


@pytest.fixture
def enrollments_repo():
    return InMemoryEnrollments([
        Enrollment(
            enrollment_id=1,
            student_id=STUDENT_ID,
            class_id=CLASS_ID,
            enrolled_at=utc(2026, 2, 1, 8, 0),
            student_name="Dara",
        )
    ])


@pytest.fixture
def attendance_repo(sessions_repo):
    return InMemoryAttendance({s.session_id: s.class_id for s in sessions_repo.sessions.values()})


@pytest.fixture
def service(attendance_repo, sessions_repo, enrollments_repo):
    return AttendanceService(attendance_repo, sessions_repo, enrollments_repo)
