from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import LATE_MAX_FRACTION, PRESENT_MAX_FRACTION
from ..core.exceptions import InvalidDuration
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    present_max_fraction: float = PRESENT_MAX_FRACTION
    late_max_fraction: float = LATE_MAX_FRACTION

    @staticmethod
    def elapsed_fraction(*, session_start: datetime, session_end: datetime, now: datetime) -> float:
        duration = (session_end - session_start).total_seconds()
        if duration <= 0:
            raise InvalidDuration()
        return (now - session_start).total_seconds() / duration

    def for_checkin(self, *, elapsed_fraction: float) -> AttendanceStrategy:
        # Upper bounds are inclusive.
        if elapsed_fraction <= self.present_max_fraction:
            return PresentStrategy()
        if elapsed_fraction <= self.late_max_fraction:
            return LateStrategy()
        return AbsentStrategy()
