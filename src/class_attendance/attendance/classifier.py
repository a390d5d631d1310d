from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_utc
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision


def classify(
    session_start: datetime,
    session_end: datetime,
    now: datetime,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> StatusDecision:
    """Status and score for a check-in at ``now``.

    Up to 15% of the session elapsed is present (1.0), up to 40% is late
    (0.5), anything later is absent (0.0). Raises InvalidDuration when the
    session does not end after it starts.
    """

    factory = factory or AttendanceStrategyFactory()
    fraction = factory.elapsed_fraction(
        session_start=to_utc(session_start),
        session_end=to_utc(session_end),
        now=to_utc(now),
    )
    return factory.for_checkin(elapsed_fraction=fraction).decide_checkin(elapsed_fraction=fraction)
