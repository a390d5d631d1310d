from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_utc(value: Union[datetime, str]) -> datetime:
    """Normalize an instant to an aware UTC datetime.

    Naive datetimes and ISO strings without an offset are UTC, never local
    time. The store keeps instants as naive UTC DATETIME columns.
    """

    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_utc_optional(value: Optional[Union[datetime, str]]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return to_utc(value)


def to_naive_utc(value: datetime) -> datetime:
    """Storage form of an instant (MySQL DATETIME has no offset)."""
    return to_utc(value).replace(tzinfo=None)


def utc_now() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def attendance_date(now: datetime) -> date:
    """Calendar day used as the attendance key: the UTC date of the instant."""
    return to_utc(now).date()


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """[first instant of month, first instant of next month) in UTC."""

    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1 <= int(year) <= 9998:
        raise ValidationError("year is out of range")

    start = datetime(int(year), int(month), 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(int(year) + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(int(year), int(month) + 1, 1, tzinfo=timezone.utc)
    return start, end
