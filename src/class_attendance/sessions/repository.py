from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Session


class SessionRepository(Protocol):
    def get_by_id(self, session_id: int, *, timeout: Optional[float] = None) -> Optional[Session]:
        raise NotImplementedError

    def list_in_range(
        self,
        *,
        class_ids: Sequence[int],
        start: datetime,
        end: datetime,
        timeout: Optional[float] = None,
    ) -> Sequence[Session]:
        """Sessions of the given classes with start_time in [start, end).

        Ordered by start_time.
        """

        raise NotImplementedError

    def list_for_classes(self, *, class_ids: Sequence[int], timeout: Optional[float] = None) -> Sequence[Session]:
        raise NotImplementedError
