"""
Authorization policy for booking operations.

`can_act` is the single place that decides whether a principal may perform an
operation on a booking. Both the booking engine and the query side call it,
and it never touches the database: everything it needs (the principal's
vendor profiles, the event's manager) is handed in.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, Protocol

from eventplanner.models.enums import BookingStatus, Role


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: str
    role: Role
    vendor_profile_ids: frozenset[str] = field(default_factory=frozenset)


class Operation(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE_STATUS = "update_status"
    UPDATE_DETAILS = "update_details"
    DELETE = "delete"


class BookingLike(Protocol):
    customer_id: str
    vendor_id: str
    status: BookingStatus


def is_booking_party(principal: Principal, booking: BookingLike) -> bool:
    """True for the booking's customer and the user owning its vendor profile."""
    return (
        principal.id == booking.customer_id
        or booking.vendor_id in principal.vendor_profile_ids
    )


def is_event_manager(principal: Principal, event_manager_id: Optional[str]) -> bool:
    return (
        principal.role is Role.MANAGER
        and event_manager_id is not None
        and principal.id == event_manager_id
    )


def can_act(
    principal: Principal,
    operation: Operation,
    booking: Optional[BookingLike] = None,
    event_manager_id: Optional[str] = None,
) -> bool:
    if operation is Operation.CREATE:
        return principal.role is Role.CUSTOMER

    if booking is None:
        return False

    if operation in (Operation.READ, Operation.UPDATE_STATUS, Operation.DELETE):
        return is_booking_party(principal, booking) or is_event_manager(principal, event_manager_id)

    if operation is Operation.UPDATE_DETAILS:
        return is_booking_party(principal, booking) and booking.status == BookingStatus.PENDING

    return False
