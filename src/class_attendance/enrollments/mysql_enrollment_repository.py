from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import to_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Enrollment
from .repository import EnrollmentRepository


def _to_enrollment(r: dict) -> Enrollment:
    return Enrollment(
        enrollment_id=int(r["enrollment_id"]),
        student_id=int(r["student_id"]),
        class_id=int(r["class_id"]),
        enrolled_at=to_utc(r["enrolled_at"]),
        student_name=r.get("full_name"),
    )


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_class(self, class_id: int, *, timeout: Optional[float] = None) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                """
                SELECT e.enrollment_id, e.student_id, e.class_id, e.enrolled_at, s.full_name
                FROM enrollments e
                LEFT JOIN students s ON s.student_id = e.student_id
                WHERE e.class_id=%s
                ORDER BY s.full_name ASC, e.student_id ASC
                """,
                (int(class_id),),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]

    def list_for_student(self, student_id: int, *, timeout: Optional[float] = None) -> Sequence[Enrollment]:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                """
                SELECT e.enrollment_id, e.student_id, e.class_id, e.enrolled_at, s.full_name
                FROM enrollments e
                LEFT JOIN students s ON s.student_id = e.student_id
                WHERE e.student_id=%s
                ORDER BY e.enrolled_at ASC
                """,
                (int(student_id),),
            )
            return [_to_enrollment(r) for r in fetchall(cur)]
