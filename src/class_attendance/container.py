from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .core.constants import CHECKOUT_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.repository import EnrollmentRepository
from .reports.service import AttendanceReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    sessions_repo: SessionRepository
    enrollments_repo: EnrollmentRepository

    attendance_service: AttendanceService
    report_service: AttendanceReportService


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    sessions_repo: SessionRepository,
    enrollments_repo: EnrollmentRepository,
    clock: Optional[Clock] = None,
    checkout_grace_minutes: int = CHECKOUT_GRACE_MINUTES,
    timeout: Optional[float] = None,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""

    clock = clock or SystemClock()
    attendance_service = AttendanceService(
        attendance_repo,
        sessions_repo,
        enrollments_repo,
        clock=clock,
        strategy_factory=AttendanceStrategyFactory(),
        checkout_grace_minutes=checkout_grace_minutes,
        timeout=timeout,
    )
    report_service = AttendanceReportService(
        attendance_repo,
        sessions_repo,
        enrollments_repo,
        clock=clock,
        checkout_grace_minutes=checkout_grace_minutes,
        timeout=timeout,
    )

    return Container(
        attendance_repo=attendance_repo,
        sessions_repo=sessions_repo,
        enrollments_repo=enrollments_repo,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    clock: Optional[Clock] = None,
    checkout_grace_minutes: int = CHECKOUT_GRACE_MINUTES,
) -> Container:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config)

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        enrollments_repo=MySQLEnrollmentRepository(conn),
        clock=clock,
        checkout_grace_minutes=checkout_grace_minutes,
    )
