from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from class_attendance.attendance.classifier import classify
from class_attendance.core.enums import ReportStatus
from class_attendance.core.exceptions import InvalidDuration

START = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
END = START + timedelta(minutes=100)


@pytest.mark.parametrize(
    "offset, status, score",
    [
        (timedelta(0), ReportStatus.PRESENT, 1.0),
        (timedelta(minutes=15), ReportStatus.PRESENT, 1.0),
        (timedelta(minutes=15, seconds=1), ReportStatus.LATE, 0.5),
        (timedelta(minutes=40), ReportStatus.LATE, 0.5),
        (timedelta(minutes=40, seconds=1), ReportStatus.ABSENT, 0.0),
        (timedelta(minutes=100), ReportStatus.ABSENT, 0.0),
    ],
)
def test_status_thresholds_on_100_minute_session(offset, status, score):
    decision = classify(START, END, START + offset)

    assert decision.status == status
    assert decision.score == score


def test_naive_instants_are_treated_as_utc():
    naive_start = START.replace(tzinfo=None)
    decision = classify(naive_start, END, START + timedelta(minutes=5))

    assert decision.status == ReportStatus.PRESENT


@pytest.mark.parametrize("end", [START, START - timedelta(minutes=1)])
def test_non_positive_duration_is_rejected(end):
    with pytest.raises(InvalidDuration):
        classify(START, end, START)
