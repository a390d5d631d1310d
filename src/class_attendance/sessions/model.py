from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..geo.model import Geofence


@dataclass(frozen=True)
class Session:
    """Domain entity: one concrete, timed occurrence of a class.

    Instants are aware UTC datetimes. ``geofence`` is None when the teacher
    configured no location, in which case check-in accepts any position.
    """

    session_id: int
    class_id: int
    name: str
    teacher_id: int
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    geofence: Optional[Geofence] = None

    @property
    def is_scheduled(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def session_date(self) -> Optional[date]:
        return self.start_time.date() if self.start_time else None

    def has_ended(self, now: datetime) -> bool:
        return self.end_time is not None and self.end_time < now
