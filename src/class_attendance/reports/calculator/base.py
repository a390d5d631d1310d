from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ScoreSummary:
    total_score: float
    attendance_rate: float


class ScoreCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance scoring)."""

    @abstractmethod
    def score_and_rate(self, scores: Iterable[float], total_sessions: int) -> ScoreSummary:
        raise NotImplementedError
