from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class Enrollment:
    """Domain entity: a student's membership in a class."""

    enrollment_id: int
    student_id: int
    class_id: int
    enrolled_at: datetime
    student_name: Optional[str] = None

    @property
    def enrolled_date(self) -> date:
        return self.enrolled_at.date()

    def covers(self, session_date: date) -> bool:
        """Sessions before the enrollment day are not counted against the student."""
        return session_date >= self.enrolled_date
