"""Read-models returned by the report service (never persisted)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ReportStatus


@dataclass
class AttendanceCounts:
    present: int = 0
    late: int = 0
    absent: int = 0

    def add(self, status: ReportStatus) -> None:
        if status == ReportStatus.PRESENT:
            self.present += 1
        elif status == ReportStatus.LATE:
            self.late += 1
        else:
            self.absent += 1


@dataclass(frozen=True)
class ReportSummary:
    total_sessions: int
    present: int
    late: int
    absent: int
    total_score: float
    attendance_rate: float


@dataclass(frozen=True)
class DailyStudentRow:
    student_id: int
    name: Optional[str]
    status: ReportStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    left_early: bool
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class DailySummary:
    session_id: int
    attendance_date: date
    summary: AttendanceCounts
    students: list[DailyStudentRow] = field(default_factory=list)


@dataclass(frozen=True)
class SessionDetailRow:
    session_id: int
    class_id: int
    session_name: str
    session_date: date
    start_time: datetime
    end_time: Optional[datetime]
    status: ReportStatus
    score: float
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlyReport:
    student_id: int
    month: int
    year: int
    details: list[SessionDetailRow]
    summary: ReportSummary


@dataclass(frozen=True)
class OverallStats:
    student_id: int
    summary: ReportSummary


@dataclass(frozen=True)
class StudentScoreRow:
    student_id: int
    name: Optional[str]
    present: int
    late: int
    absent: int
    total_sessions: int
    score: float
    attendance_rate: float


@dataclass(frozen=True)
class ClassTotals:
    present: int
    late: int
    absent: int
    total_sessions: int


@dataclass(frozen=True)
class ClassMonthlySummary:
    class_id: int
    month: int
    year: int
    summary: ClassTotals
    students: list[StudentScoreRow]


@dataclass(frozen=True)
class OngoingStudentRow:
    student_id: int
    name: Optional[str]
    status: ReportStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    attendance_id: Optional[int]


@dataclass(frozen=True)
class SessionHistoryRow:
    session_id: int
    session_date: date
    present: int
    late: int
    absent: int
