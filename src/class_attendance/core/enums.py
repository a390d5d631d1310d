from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record (fixed at check-in)."""

    PRESENT = "present"
    LATE = "late"


class ReportStatus(str, Enum):
    """Status as shown in reports.

    ABSENT is synthesized for sessions without a record and is never stored.
    """

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"

    @classmethod
    def from_record(cls, status: AttendanceStatus) -> "ReportStatus":
        return cls(status.value)
