from __future__ import annotations

from ...core.constants import ABSENT_SCORE
from ...core.enums import ReportStatus
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Too much of the session has passed; the service rejects the check-in."""

    def decide_checkin(self, *, elapsed_fraction: float) -> StatusDecision:
        return StatusDecision(status=ReportStatus.ABSENT, score=ABSENT_SCORE)
