from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import to_naive_utc, to_utc_optional
from ..common.validators import coerce_coordinate
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from ..geo.model import Geofence, GeoPoint
from .model import Session
from .repository import SessionRepository

_COLUMNS = """
    session_id, class_id, session_name, teacher_id,
    latitude, longitude, radius_meters, start_time, end_time
"""


def _geofence_from_row(r: dict) -> Optional[Geofence]:
    lat, lng = r.get("latitude"), r.get("longitude")
    if lat in (None, "") or lng in (None, ""):
        return None
    radius = r.get("radius_meters")
    return Geofence(
        center=GeoPoint(latitude=coerce_coordinate(lat), longitude=coerce_coordinate(lng)),
        radius_meters=float(radius if radius is not None else DEFAULT_GEOFENCE_RADIUS_METERS),
    )


def _to_session(r: dict) -> Session:
    return Session(
        session_id=int(r["session_id"]),
        class_id=int(r["class_id"]),
        name=r["session_name"],
        teacher_id=int(r["teacher_id"]),
        start_time=to_utc_optional(r.get("start_time")),
        end_time=to_utc_optional(r.get("end_time")),
        geofence=_geofence_from_row(r),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: int, *, timeout: Optional[float] = None) -> Optional[Session]:
        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM class_sessions WHERE session_id=%s",
                (int(session_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_in_range(
        self,
        *,
        class_ids: Sequence[int],
        start: datetime,
        end: datetime,
        timeout: Optional[float] = None,
    ) -> Sequence[Session]:
        if not class_ids:
            return []

        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_sessions
                WHERE class_id IN ({in_clause(class_ids)})
                  AND start_time >= %s AND start_time < %s
                ORDER BY start_time ASC
                """,
                (*[int(c) for c in class_ids], to_naive_utc(start), to_naive_utc(end)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_for_classes(self, *, class_ids: Sequence[int], timeout: Optional[float] = None) -> Sequence[Session]:
        if not class_ids:
            return []

        with db_cursor(self._conn_factory, timeout=timeout) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM class_sessions
                WHERE class_id IN ({in_clause(class_ids)})
                ORDER BY start_time ASC
                """,
                tuple(int(c) for c in class_ids),
            )
            return [_to_session(r) for r in fetchall(cur)]
