from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's check-in for one session on one day.

    ``status`` and ``check_in_time`` are fixed at check-in; ``check_out_time``
    is set at most once.
    """

    attendance_id: int
    student_id: int
    session_id: int
    attendance_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    score: float

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def left_early(self, *, session_end: Optional[datetime], now: datetime, grace_minutes: int) -> bool:
        """Checked in, never checked out, and the check-out window has closed."""

        if session_end is None or self.check_out_time is not None:
            return False
        return now > session_end + timedelta(minutes=grace_minutes)


@dataclass(frozen=True)
class CheckInResult:
    record: AttendanceRecord
    already_checked_in: bool


@dataclass(frozen=True)
class RecordFilter:
    student_id: Optional[int] = None
    session_id: Optional[int] = None
    class_id: Optional[int] = None
    attendance_date: Optional[date] = None
    session_ids: Optional[tuple[int, ...]] = None
