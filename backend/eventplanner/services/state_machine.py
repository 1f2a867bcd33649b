"""
Booking status lifecycle.

    pending -> confirmed -> in_progress -> completed
       |           |            |
       +-----------+------------+--> cancelled

completed and cancelled are terminal.
"""

from eventplanner.core.exceptions import InvalidTransitionError
from eventplanner.models.enums import BookingStatus

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def can_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    return BookingStatus(requested) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def validate_transition(current: BookingStatus, requested: BookingStatus) -> None:
    """Raise InvalidTransitionError unless current -> requested is an edge."""
    if not can_transition(current, requested):
        raise InvalidTransitionError(
            current=BookingStatus(current).value,
            requested=BookingStatus(requested).value,
        )


def is_terminal(status: BookingStatus) -> bool:
    return not ALLOWED_TRANSITIONS[BookingStatus(status)]
