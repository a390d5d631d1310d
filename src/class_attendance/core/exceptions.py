from __future__ import annotations

from datetime import datetime
from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass has a stable ``code`` so callers (and the HTTP layer) can
    branch on the kind without parsing messages.
    """

    code = "domain_error"
    default_message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    default_message = "Invalid input"


class SessionNotFound(DomainError):
    code = "session_not_found"
    default_message = "Session not found"


class NotEnrolled(DomainError):
    code = "not_enrolled"
    default_message = "Not enrolled in this class"


class SessionNotConfigured(DomainError):
    code = "session_not_configured"
    default_message = "Session has no start or end time configured"


class SessionNotActive(DomainError):
    code = "session_not_active"
    default_message = "Check-in is only available while the session is running"

    def __init__(self, start_time: datetime, end_time: datetime, message: Optional[str] = None):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["start_time"] = self.start_time.isoformat()
        data["end_time"] = self.end_time.isoformat()
        return data


class OutOfRange(DomainError):
    code = "out_of_range"

    def __init__(self, distance_meters: float, radius_meters: float):
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters
        super().__init__(
            f"You are {distance_meters:.0f}m away from the session location "
            f"(allowed radius {radius_meters:.0f}m)"
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["distance_meters"] = round(self.distance_meters, 1)
        data["radius_meters"] = self.radius_meters
        return data


class AttendanceWindowExceeded(DomainError):
    code = "attendance_window_exceeded"
    default_message = "Check-in window has closed for this session"


class InvalidDuration(DomainError):
    code = "invalid_duration"
    default_message = "Session end time must be after its start time"


class RecordNotFound(DomainError):
    code = "record_not_found"
    default_message = "Attendance record not found"


class AlreadyCheckedOut(DomainError):
    code = "already_checked_out"
    default_message = "Already checked out"


class SessionEndNotConfigured(DomainError):
    code = "session_end_not_configured"
    default_message = "Session has no end time configured"


class CheckoutTooEarly(DomainError):
    code = "checkout_too_early"
    default_message = "Check-out is only available after the session ends"


class CheckoutWindowExpired(DomainError):
    code = "checkout_window_expired"
    default_message = "Check-out window has expired"


class StoreError(DomainError):
    """Raised when the backing store fails (connection, timeout, driver error)."""

    code = "store_error"
    default_message = "Attendance store is unavailable"


class DuplicateRecordError(StoreError):
    """Unique key (student, session, date) already taken."""

    code = "duplicate_record"
    default_message = "Attendance record already exists"
