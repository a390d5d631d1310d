from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.enums import ReportStatus


@dataclass(frozen=True)
class StatusDecision:
    status: ReportStatus
    score: float

    @property
    def is_absent(self) -> bool:
        return self.status == ReportStatus.ABSENT


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide an attendance status."""

    @abstractmethod
    def decide_checkin(self, *, elapsed_fraction: float) -> StatusDecision:
        raise NotImplementedError
