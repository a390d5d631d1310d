from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .base import ScoreCalculator, ScoreSummary


class StandardScoreCalculator(ScoreCalculator):
    """Standard rule: rate = sum(scores) / sessions * 100, one decimal, half up.

    Zero counted sessions gives a rate of 0.
    """

    def score_and_rate(self, scores: Iterable[float], total_sessions: int) -> ScoreSummary:
        total = sum(float(s) for s in scores)
        if total_sessions <= 0:
            return ScoreSummary(total_score=total, attendance_rate=0.0)

        rate = Decimal(str(total / total_sessions * 100)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return ScoreSummary(total_score=total, attendance_rate=float(rate))
