from __future__ import annotations

from ...core.constants import LATE_SCORE
from ...core.enums import ReportStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, elapsed_fraction: float) -> StatusDecision:
        return StatusDecision(status=ReportStatus.LATE, score=LATE_SCORE)
