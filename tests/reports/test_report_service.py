from __future__ import annotations

from datetime import date, timedelta

import pytest

from class_attendance.core.enums import AttendanceStatus, ReportStatus
from class_attendance.core.exceptions import SessionNotFound, ValidationError
from class_attendance.enrollments.model import Enrollment
from class_attendance.reports.service import AttendanceReportService
from class_attendance.sessions.model import Session

from fakes import InMemoryAttendance, InMemoryEnrollments, InMemorySessions, utc

CLASS_ID = 10


def _session(session_id: int, day: int) -> Session:
    start = utc(2026, 3, day, 9, 0)
    return Session(
        session_id=session_id,
        class_id=CLASS_ID,
        name=f"Lecture {session_id}",
        teacher_id=7,
        start_time=start,
        end_time=start + timedelta(hours=1),
    )


def _checkin(repo: InMemoryAttendance, student_id: int, session: Session, minutes: int, status: AttendanceStatus):
    return repo.insert_checkin(
        student_id=student_id,
        session_id=session.session_id,
        attendance_date=session.session_date,
        check_in_time=session.start_time + timedelta(minutes=minutes),
        status=status,
        score=1.0 if status == AttendanceStatus.PRESENT else 0.5,
    )


@pytest.fixture
def march():
    """Three sessions in March; Dara enrolled in February, Sok on March 10."""

    sessions = InMemorySessions()
    s1 = sessions.add(_session(201, 5))
    s2 = sessions.add(_session(202, 15))
    s3 = sessions.add(_session(203, 20))
    sessions.add(Session(204, CLASS_ID, "Unscheduled", 7, None, None))

    enrollments = InMemoryEnrollments([
        Enrollment(1, 1, CLASS_ID, utc(2026, 2, 1, 8, 0), "Dara"),
        Enrollment(2, 2, CLASS_ID, utc(2026, 3, 10, 8, 0), "Sok"),
    ])

    attendance = InMemoryAttendance()
    _checkin(attendance, 1, s1, 5, AttendanceStatus.PRESENT)
    _checkin(attendance, 1, s2, 2, AttendanceStatus.PRESENT)
    _checkin(attendance, 1, s3, 20, AttendanceStatus.LATE)
    _checkin(attendance, 2, s2, 30, AttendanceStatus.LATE)

    return AttendanceReportService(attendance, sessions, enrollments)


def test_monthly_report_scores_and_rate(march):
    report = march.monthly_report(1, 3, 2026)

    assert report.summary.total_sessions == 3
    assert (report.summary.present, report.summary.late, report.summary.absent) == (2, 1, 0)
    assert report.summary.total_score == 2.5
    assert report.summary.attendance_rate == 83.3
    assert [d.session_id for d in report.details] == [201, 202, 203]


def test_monthly_report_ignores_sessions_before_enrollment(march):
    report = march.monthly_report(2, 3, 2026)

    assert [d.session_id for d in report.details] == [202, 203]
    assert [d.status for d in report.details] == [ReportStatus.LATE, ReportStatus.ABSENT]
    assert report.details[1].score == 0.0
    assert report.summary.total_score == 0.5
    assert report.summary.attendance_rate == 25.0


def test_monthly_report_with_no_sessions(march):
    report = march.monthly_report(1, 4, 2026)

    assert report.summary.total_sessions == 0
    assert report.summary.attendance_rate == 0.0
    assert report.details == []


def test_monthly_report_filters_by_class(march):
    assert march.monthly_report(1, 3, 2026, class_id=99).summary.total_sessions == 0


@pytest.mark.parametrize("month", [0, 13])
def test_month_out_of_range(march, month):
    with pytest.raises(ValidationError):
        march.monthly_report(1, month, 2026)


def test_overall_stats_counts_only_ended_sessions(march):
    stats = march.overall_stats(1, now=utc(2026, 3, 16, 12, 0))

    assert stats.summary.total_sessions == 2
    assert stats.summary.present == 2
    assert stats.summary.attendance_rate == 100.0


def test_class_monthly_summary_sorted_by_score(march):
    data = march.class_monthly_summary(CLASS_ID, 3, 2026)

    assert [r.student_id for r in data.students] == [1, 2]
    sok = data.students[1]
    assert (sok.present, sok.late, sok.absent, sok.total_sessions) == (0, 1, 1, 2)
    assert sok.attendance_rate == 25.0
    assert (data.summary.present, data.summary.late, data.summary.absent) == (2, 2, 1)
    assert data.summary.total_sessions == 3


def test_daily_summary_flags_students_who_left_early(march):
    data = march.daily_summary(203, date(2026, 3, 20), now=utc(2026, 3, 20, 10, 30))

    rows = {r.student_id: r for r in data.students}
    assert rows[1].status == ReportStatus.LATE
    assert rows[1].left_early is True
    assert rows[2].status == ReportStatus.ABSENT
    assert rows[2].left_early is False
    assert (data.summary.present, data.summary.late, data.summary.absent) == (0, 1, 1)


def test_daily_summary_within_grace_window_is_not_left_early(march):
    data = march.daily_summary(203, date(2026, 3, 20), now=utc(2026, 3, 20, 10, 10))

    assert not any(r.left_early for r in data.students)


def test_daily_summary_excludes_students_enrolled_later(march):
    data = march.daily_summary(201, date(2026, 3, 5), now=utc(2026, 3, 5, 12, 0))

    assert [r.student_id for r in data.students] == [1]


def test_daily_summary_unknown_session(march):
    with pytest.raises(SessionNotFound):
        march.daily_summary(999, date(2026, 3, 5))


def test_ongoing_attendance_lists_roster(march):
    rows = march.ongoing_attendance(203, now=utc(2026, 3, 20, 9, 30))

    by_student = {r.student_id: r for r in rows}
    assert by_student[1].status == ReportStatus.LATE
    assert by_student[1].attendance_id is not None
    assert by_student[2].status == ReportStatus.ABSENT
    assert by_student[2].check_in_time is None


def test_class_session_history(march):
    history = march.class_session_history(CLASS_ID, 3, 2026)

    assert [(h.session_id, h.present, h.late, h.absent) for h in history] == [
        (201, 1, 0, 0),
        (202, 1, 1, 0),
        (203, 0, 1, 1),
    ]


def test_class_session_history_empty_month(march):
    assert march.class_session_history(CLASS_ID, 5, 2026) == []
