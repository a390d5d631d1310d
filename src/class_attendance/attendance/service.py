from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import attendance_date, to_utc
from ..core.constants import CHECKOUT_GRACE_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedOut,
    AttendanceWindowExceeded,
    CheckoutTooEarly,
    CheckoutWindowExpired,
    DuplicateRecordError,
    NotEnrolled,
    OutOfRange,
    RecordNotFound,
    SessionEndNotConfigured,
    SessionNotActive,
    SessionNotConfigured,
    SessionNotFound,
)
from ..enrollments.repository import EnrollmentRepository
from ..geo.validator import check_location
from ..sessions.repository import SessionRepository
from .classifier import classify
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, CheckInResult, RecordFilter
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in / check-out state machine.

    Per (student, session, day): not checked in -> checked in -> checked out.
    Check-in is idempotent; the store's unique key resolves concurrent
    duplicates. Nothing is cached in-process.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        enrollments: EnrollmentRepository | None = None,
        *,
        clock: Clock | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
        checkout_grace_minutes: int = CHECKOUT_GRACE_MINUTES,
        timeout: float | None = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._enrollments = enrollments
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace = timedelta(minutes=int(checkout_grace_minutes))
        self._timeout = timeout

    def _now(self, now: datetime | None) -> datetime:
        return to_utc(now) if now is not None else self._clock.now()

    def _timeout_for(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self._timeout

    def _require_enrolled(self, student_id: int, class_id: int, timeout: float | None) -> None:
        if self._enrollments is None:
            return
        enrollments = self._enrollments.list_for_student(student_id, timeout=timeout)
        if not any(e.class_id == class_id for e in enrollments):
            raise NotEnrolled()

    def check_in(
        self,
        student_id: int,
        session_id: int,
        student_lat: Any,
        student_lng: Any,
        *,
        now: datetime | None = None,
        timeout: float | None = None,
    ) -> CheckInResult:
        now = self._now(now)
        today = attendance_date(now)
        timeout = self._timeout_for(timeout)

        existing = self._attendance.find_for_student_session_date(student_id, session_id, today, timeout=timeout)
        if existing:
            logger.info("Student %s already checked in to session %s on %s", student_id, session_id, today)
            return CheckInResult(record=existing, already_checked_in=True)

        session = self._sessions.get_by_id(session_id, timeout=timeout)
        if not session:
            raise SessionNotFound()

        self._require_enrolled(student_id, session.class_id, timeout)

        if not session.is_scheduled:
            raise SessionNotConfigured()
        if now < session.start_time or now > session.end_time:
            raise SessionNotActive(session.start_time, session.end_time)

        geo = check_location(session.geofence, student_lat, student_lng)
        if not geo.inside:
            logger.warning(
                "Student %s is %.1fm from session %s (radius %.0fm)",
                student_id, geo.distance_meters, session_id, geo.radius_meters,
            )
            raise OutOfRange(geo.distance_meters, geo.radius_meters)

        decision = classify(session.start_time, session.end_time, now, factory=self._factory)
        if decision.is_absent:
            raise AttendanceWindowExceeded()

        try:
            record = self._attendance.insert_checkin(
                student_id=student_id,
                session_id=session_id,
                attendance_date=today,
                check_in_time=now,
                status=AttendanceStatus(decision.status.value),
                score=decision.score,
                timeout=timeout,
            )
        except DuplicateRecordError:
            # Lost the race against a concurrent check-in for the same key.
            existing = self._attendance.find_for_student_session_date(student_id, session_id, today, timeout=timeout)
            if existing is None:
                raise
            return CheckInResult(record=existing, already_checked_in=True)

        logger.info(
            "Student %s checked in to session %s as %s (record %s)",
            student_id, session_id, record.status.value, record.attendance_id,
        )
        return CheckInResult(record=record, already_checked_in=False)

    def check_out(
        self,
        attendance_id: int,
        *,
        now: datetime | None = None,
        timeout: float | None = None,
    ) -> AttendanceRecord:
        now = self._now(now)
        timeout = self._timeout_for(timeout)

        record = self._attendance.get_by_id(attendance_id, timeout=timeout)
        if not record:
            raise RecordNotFound()
        if record.is_checked_out:
            raise AlreadyCheckedOut()

        session = self._sessions.get_by_id(record.session_id, timeout=timeout)
        if not session:
            raise SessionNotFound()
        if session.end_time is None:
            raise SessionEndNotConfigured()

        if now < session.end_time:
            raise CheckoutTooEarly()
        if now > session.end_time + self._grace:
            raise CheckoutWindowExpired()

        if not self._attendance.update_checkout(attendance_id=attendance_id, check_out_time=now, timeout=timeout):
            raise AlreadyCheckedOut()

        logger.info("Record %s checked out at %s", attendance_id, now.isoformat())
        return replace(record, check_out_time=now)

    def get_active_record(
        self,
        student_id: int,
        session_id: int,
        *,
        now: datetime | None = None,
        timeout: float | None = None,
    ) -> Optional[AttendanceRecord]:
        """Today's record for the pair, checked out or not."""

        today = attendance_date(self._now(now))
        return self._attendance.find_for_student_session_date(
            student_id, session_id, today, timeout=self._timeout_for(timeout)
        )

    def list_records(self, record_filter: RecordFilter, *, timeout: float | None = None) -> Sequence[AttendanceRecord]:
        return self._attendance.query(record_filter, timeout=self._timeout_for(timeout))
