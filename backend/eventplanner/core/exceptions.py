"""
Booking domain errors.

Every failure the booking subsystem can report to a caller is one of these.
They carry the HTTP status they map to plus a stable machine-readable code;
`api/errors.py` turns them into JSON responses.
"""

from typing import Any, Optional


class BookingDomainError(Exception):
    status_code: int = 400
    error_code: str = "booking_error"

    def __init__(self, message: str, **extra: Any):
        self.message = message
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.error_code, "detail": self.message, **self.extra}


class NotFoundError(BookingDomainError):
    status_code = 404
    error_code = "not_found"


class ForbiddenError(BookingDomainError):
    status_code = 403
    error_code = "forbidden"

    def __init__(self, message: str = "Access denied", **extra: Any):
        super().__init__(message, **extra)


class UnavailableError(BookingDomainError):
    error_code = "unavailable"


class CapacityExceededError(BookingDomainError):
    error_code = "capacity_exceeded"

    def __init__(self, capacity: int):
        super().__init__(
            f"Service capacity exceeded. Maximum: {capacity}",
            capacity=capacity,
        )
        self.capacity = capacity


class SchedulingConflictError(BookingDomainError):
    error_code = "scheduling_conflict"

    def __init__(self, message: str = "Time slot conflict with existing booking", **extra: Any):
        super().__init__(message, **extra)


class InvalidTransitionError(BookingDomainError):
    error_code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot transition from {current} to {requested}",
            current_status=current,
            requested_status=requested,
        )
        self.current = current
        self.requested = requested


class InvalidStateError(BookingDomainError):
    error_code = "invalid_state"

    def __init__(self, current: str, action: Optional[str] = None):
        action = action or "modify"
        super().__init__(
            f"Cannot {action} booking that is not pending",
            current_status=current,
        )
        self.current = current


class InvalidTimeRangeError(BookingDomainError):
    error_code = "invalid_time_range"

    def __init__(self, message: str = "End time must be after start time"):
        super().__init__(message)
