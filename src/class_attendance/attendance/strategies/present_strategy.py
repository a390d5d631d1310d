from __future__ import annotations

from ...core.constants import PRESENT_SCORE
from ...core.enums import ReportStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in within the first part of the session."""

    def decide_checkin(self, *, elapsed_fraction: float) -> StatusDecision:
        return StatusDecision(status=ReportStatus.PRESENT, score=PRESENT_SCORE)
