from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, RecordFilter


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int, *, timeout: Optional[float] = None) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_for_student_session_date(
        self,
        student_id: int,
        session_id: int,
        attendance_date: date,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert_checkin(
        self,
        *,
        student_id: int,
        session_id: int,
        attendance_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        score: float,
        timeout: Optional[float] = None,
    ) -> AttendanceRecord:
        """Persist a new check-in.

        Raises DuplicateRecordError when (student, session, date) already
        exists; the store's unique key is the source of truth for that.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        timeout: Optional[float] = None,
    ) -> bool:
        """Set check_out_time only if it is still empty.

        Returns False when no row was changed.
        """

        raise NotImplementedError

    def query(self, record_filter: RecordFilter, *, timeout: Optional[float] = None) -> Sequence[AttendanceRecord]:
        """Records matching every set field of the filter, newest first."""

        raise NotImplementedError
