from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord, RecordFilter
from ..attendance.repository import AttendanceRepository
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import attendance_date, month_bounds, to_utc
from ..core.constants import CHECKOUT_GRACE_MINUTES
from ..core.enums import ReportStatus
from ..core.exceptions import SessionNotFound
from ..enrollments.model import Enrollment
from ..enrollments.repository import EnrollmentRepository
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from .calculator.base import ScoreCalculator
from .calculator.standard_calculator import StandardScoreCalculator
from .model import (
    AttendanceCounts,
    ClassMonthlySummary,
    ClassTotals,
    DailySummary,
    DailyStudentRow,
    MonthlyReport,
    OngoingStudentRow,
    OverallStats,
    ReportSummary,
    SessionDetailRow,
    SessionHistoryRow,
    StudentScoreRow,
)

logger = logging.getLogger(__name__)


def _first_record_per_session(records: Iterable[AttendanceRecord]) -> dict[int, AttendanceRecord]:
    by_session: dict[int, AttendanceRecord] = {}
    for r in records:
        current = by_session.get(r.session_id)
        if current is None or r.check_in_time < current.check_in_time:
            by_session[r.session_id] = r
    return by_session


def _status_of(record: Optional[AttendanceRecord]) -> ReportStatus:
    return ReportStatus.from_record(record.status) if record else ReportStatus.ABSENT


class AttendanceReportService:
    """Read-only aggregation over sessions, enrollments and attendance records.

    Sessions without a record count as absent (score 0). A student is only
    evaluated against sessions held on or after the day they enrolled.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        enrollments: EnrollmentRepository,
        *,
        clock: Optional[Clock] = None,
        calculator: Optional[ScoreCalculator] = None,
        checkout_grace_minutes: int = CHECKOUT_GRACE_MINUTES,
        timeout: Optional[float] = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._enrollments = enrollments
        self._clock = clock or SystemClock()
        self._calculator = calculator or StandardScoreCalculator()
        self._grace_minutes = int(checkout_grace_minutes)
        self._timeout = timeout

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_utc(now) if now is not None else self._clock.now()

    def _timeout_for(self, timeout: Optional[float]) -> Optional[float]:
        return timeout if timeout is not None else self._timeout

    def _get_session(self, session_id: int, timeout: Optional[float]) -> Session:
        session = self._sessions.get_by_id(session_id, timeout=timeout)
        if not session:
            raise SessionNotFound()
        return session

    def _summarize(
        self, sessions: Sequence[Session], by_session: dict[int, AttendanceRecord]
    ) -> tuple[list[SessionDetailRow], ReportSummary]:
        counts = AttendanceCounts()
        details: list[SessionDetailRow] = []
        scores: list[float] = []

        for s in sessions:
            record = by_session.get(s.session_id)
            status = _status_of(record)
            score = record.score if record else 0.0
            counts.add(status)
            scores.append(score)
            details.append(
                SessionDetailRow(
                    session_id=s.session_id,
                    class_id=s.class_id,
                    session_name=s.name,
                    session_date=s.session_date,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    status=status,
                    score=score,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                )
            )

        totals = self._calculator.score_and_rate(scores, len(sessions))
        summary = ReportSummary(
            total_sessions=len(sessions),
            present=counts.present,
            late=counts.late,
            absent=counts.absent,
            total_score=totals.total_score,
            attendance_rate=totals.attendance_rate,
        )
        return details, summary

    def _student_records(self, student_id: int, sessions: Sequence[Session], timeout: Optional[float]):
        if not sessions:
            return {}
        records = self._attendance.query(
            RecordFilter(student_id=student_id, session_ids=tuple(s.session_id for s in sessions)),
            timeout=timeout,
        )
        return _first_record_per_session(records)

    @staticmethod
    def _covered(sessions: Iterable[Session], enrollments: dict[int, Enrollment]) -> list[Session]:
        return [
            s for s in sessions
            if s.start_time is not None and s.class_id in enrollments and enrollments[s.class_id].covers(s.session_date)
        ]

    def daily_summary(
        self,
        session_id: int,
        on_date: date,
        *,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> DailySummary:
        now = self._now(now)
        timeout = self._timeout_for(timeout)
        session = self._get_session(session_id, timeout)

        eligible = [e for e in self._enrollments.list_for_class(session.class_id, timeout=timeout) if e.covers(on_date)]
        records = self._attendance.query(RecordFilter(session_id=session_id, attendance_date=on_date), timeout=timeout)
        by_student = {r.student_id: r for r in records}

        counts = AttendanceCounts()
        rows: list[DailyStudentRow] = []
        for e in eligible:
            record = by_student.get(e.student_id)
            status = _status_of(record)
            counts.add(status)
            rows.append(
                DailyStudentRow(
                    student_id=e.student_id,
                    name=e.student_name,
                    status=status,
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                    left_early=bool(record) and record.left_early(
                        session_end=session.end_time, now=now, grace_minutes=self._grace_minutes
                    ),
                    attendance_id=record.attendance_id if record else None,
                )
            )

        return DailySummary(session_id=session_id, attendance_date=on_date, summary=counts, students=rows)

    def monthly_report(
        self,
        student_id: int,
        month: int,
        year: int,
        class_id: Optional[int] = None,
        *,
        timeout: Optional[float] = None,
    ) -> MonthlyReport:
        start, end = month_bounds(month, year)
        timeout = self._timeout_for(timeout)

        enrollments = {
            e.class_id: e
            for e in self._enrollments.list_for_student(student_id, timeout=timeout)
            if class_id is None or e.class_id == class_id
        }
        sessions = self._covered(
            self._sessions.list_in_range(class_ids=list(enrollments), start=start, end=end, timeout=timeout),
            enrollments,
        )
        sessions.sort(key=lambda s: s.start_time)

        details, summary = self._summarize(sessions, self._student_records(student_id, sessions, timeout))
        logger.debug("Monthly report for student %s %02d/%d: %d sessions", student_id, month, year, len(sessions))
        return MonthlyReport(student_id=student_id, month=month, year=year, details=details, summary=summary)

    def overall_stats(
        self,
        student_id: int,
        *,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> OverallStats:
        now = self._now(now)
        timeout = self._timeout_for(timeout)

        enrollments = {e.class_id: e for e in self._enrollments.list_for_student(student_id, timeout=timeout)}
        sessions = [
            s for s in self._covered(
                self._sessions.list_for_classes(class_ids=list(enrollments), timeout=timeout), enrollments
            )
            if s.has_ended(now)
        ]

        _, summary = self._summarize(sessions, self._student_records(student_id, sessions, timeout))
        return OverallStats(student_id=student_id, summary=summary)

    def class_monthly_summary(
        self,
        class_id: int,
        month: int,
        year: int,
        *,
        timeout: Optional[float] = None,
    ) -> ClassMonthlySummary:
        start, end = month_bounds(month, year)
        timeout = self._timeout_for(timeout)

        sessions = [
            s for s in self._sessions.list_in_range(class_ids=[class_id], start=start, end=end, timeout=timeout)
            if s.start_time is not None
        ]
        enrollments = self._enrollments.list_for_class(class_id, timeout=timeout)
        records: Sequence[AttendanceRecord] = []
        if sessions:
            records = self._attendance.query(
                RecordFilter(session_ids=tuple(s.session_id for s in sessions)), timeout=timeout
            )

        rows: list[StudentScoreRow] = []
        for e in enrollments:
            valid_ids = {s.session_id for s in sessions if e.covers(s.session_date)}
            mine = _first_record_per_session(
                r for r in records if r.student_id == e.student_id and r.session_id in valid_ids
            ).values()

            present = sum(1 for r in mine if ReportStatus.from_record(r.status) == ReportStatus.PRESENT)
            late = sum(1 for r in mine if ReportStatus.from_record(r.status) == ReportStatus.LATE)
            totals = self._calculator.score_and_rate((r.score for r in mine), len(valid_ids))
            rows.append(
                StudentScoreRow(
                    student_id=e.student_id,
                    name=e.student_name,
                    present=present,
                    late=late,
                    absent=max(0, len(valid_ids) - (present + late)),
                    total_sessions=len(valid_ids),
                    score=totals.total_score,
                    attendance_rate=totals.attendance_rate,
                )
            )

        rows.sort(key=lambda r: r.score, reverse=True)
        summary = ClassTotals(
            present=sum(r.present for r in rows),
            late=sum(r.late for r in rows),
            absent=sum(r.absent for r in rows),
            total_sessions=len(sessions),
        )
        return ClassMonthlySummary(class_id=class_id, month=month, year=year, summary=summary, students=rows)

    def ongoing_attendance(
        self,
        session_id: int,
        *,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> list[OngoingStudentRow]:
        """Live roster for a running session."""

        today = attendance_date(self._now(now))
        timeout = self._timeout_for(timeout)
        session = self._get_session(session_id, timeout)

        records = self._attendance.query(RecordFilter(session_id=session_id, attendance_date=today), timeout=timeout)
        by_student = {r.student_id: r for r in records}

        rows = []
        for e in self._enrollments.list_for_class(session.class_id, timeout=timeout):
            if not e.covers(today):
                continue
            record = by_student.get(e.student_id)
            rows.append(
                OngoingStudentRow(
                    student_id=e.student_id,
                    name=e.student_name,
                    status=_status_of(record),
                    check_in_time=record.check_in_time if record else None,
                    check_out_time=record.check_out_time if record else None,
                    attendance_id=record.attendance_id if record else None,
                )
            )
        return rows

    def class_session_history(
        self,
        class_id: int,
        month: int,
        year: int,
        *,
        timeout: Optional[float] = None,
    ) -> list[SessionHistoryRow]:
        """Per-session present/late/absent counts for a class in a month."""

        start, end = month_bounds(month, year)
        timeout = self._timeout_for(timeout)

        sessions = [
            s for s in self._sessions.list_in_range(class_ids=[class_id], start=start, end=end, timeout=timeout)
            if s.start_time is not None
        ]
        if not sessions:
            return []

        enrollments = self._enrollments.list_for_class(class_id, timeout=timeout)
        records = self._attendance.query(
            RecordFilter(session_ids=tuple(s.session_id for s in sessions)), timeout=timeout
        )

        history = []
        for s in sorted(sessions, key=lambda x: x.start_time):
            eligible = {e.student_id for e in enrollments if e.covers(s.session_date)}
            by_student: dict[int, AttendanceRecord] = {}
            for r in records:
                if r.session_id != s.session_id or r.student_id not in eligible:
                    continue
                if r.student_id not in by_student or r.check_in_time < by_student[r.student_id].check_in_time:
                    by_student[r.student_id] = r

            statuses = [ReportStatus.from_record(r.status) for r in by_student.values()]
            present = statuses.count(ReportStatus.PRESENT)
            late = statuses.count(ReportStatus.LATE)
            history.append(
                SessionHistoryRow(
                    session_id=s.session_id,
                    session_date=s.session_date,
                    present=present,
                    late=late,
                    absent=max(0, len(eligible) - (present + late)),
                )
            )
        return history
