from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Enrollment


class EnrollmentRepository(Protocol):
    def list_for_class(self, class_id: int, *, timeout: Optional[float] = None) -> Sequence[Enrollment]:
        raise NotImplementedError

    def list_for_student(self, student_id: int, *, timeout: Optional[float] = None) -> Sequence[Enrollment]:
        raise NotImplementedError
