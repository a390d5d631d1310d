from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import to_naive_utc, to_utc, to_utc_optional
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, RecordFilter
from .repository import AttendanceRepository

_COLUMNS = """
    ar.attendance_id, ar.student_id, ar.session_id, ar.attendance_date,
    ar.check_in_time, ar.check_out_time, ar.status, ar.score
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        session_id=int(r["session_id"]),
        attendance_date=r["attendance_date"],
        check_in_time=to_utc(r["check_in_time"]),
        check_out_time=to_utc_optional(r.get("check_out_time")),
        status=AttendanceStatus(r["status"]),
        score=float(r["score"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int, *, timeout: Optional[float] = None) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_for_student_session_date(
        self,
        student_id: int,
        session_id: int,
        attendance_date: date,
        *,
        timeout: Optional[float] = None,
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                WHERE ar.student_id=%s AND ar.session_id=%s AND ar.attendance_date=%s
                """,
                (int(student_id), int(session_id), attendance_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        # A concurrent duplicate trips uq_attendance_student_session_date and
        # surfaces from db_cursor as DuplicateRecordError.
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, session_id, attendance_date, check_in_time, status, score)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(session_id), attendance_date, to_naive_utc(check_in_time), status.value, score),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=int(student_id),
            session_id=int(session_id),
            attendance_date=attendance_date,
            check_in_time=to_utc(check_in_time),
            check_out_time=None,
            status=status,
            score=float(score),
        )

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        timeout: Optional[float] = None,
    ) -> bool:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (to_naive_utc(check_out_time), int(attendance_id)),
            )
            return cur.rowcount > 0

    def query(self, record_filter: RecordFilter, *, timeout: Optional[float] = None) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if record_filter.student_id is not None:
            clauses.append("ar.student_id=%s")
            params.append(int(record_filter.student_id))
        if record_filter.session_id is not None:
            clauses.append("ar.session_id=%s")
            params.append(int(record_filter.session_id))
        if record_filter.class_id is not None:
            clauses.append("cs.class_id=%s")
            params.append(int(record_filter.class_id))
        if record_filter.attendance_date is not None:
            clauses.append("ar.attendance_date=%s")
            params.append(record_filter.attendance_date)
        if record_filter.session_ids is not None:
            if not record_filter.session_ids:
                return []
            clauses.append(f"ar.session_id IN ({in_clause(record_filter.session_ids)})")
            params.extend(int(s) for s in record_filter.session_ids)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records ar
                JOIN class_sessions cs ON cs.session_id = ar.session_id
                {where}
                ORDER BY ar.attendance_date DESC, ar.check_in_time DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
