"""
Read side of the booking subsystem: role-scoped listing, single reads and
aggregate statistics.
"""

import math
from typing import Optional

from eventplanner.core.exceptions import ForbiddenError, NotFoundError
from eventplanner.core.logging import get_logger
from eventplanner.models.booking import Booking
from eventplanner.models.enums import BookingStatus, Role
from eventplanner.schemas.booking import BookingStatsResponse, Pagination
from eventplanner.services import cache_service
from eventplanner.services.interfaces.stores import BookingFilters, BookingScope, BookingStore
from eventplanner.services.policy import Operation, Principal, can_act

logger = get_logger(__name__)


def scope_for(principal: Principal) -> BookingScope:
    """
    Customers see bookings they made, vendors see bookings on any of their
    vendor profiles, managers and admins see everything.
    """
    if principal.role is Role.CUSTOMER:
        return BookingScope(customer_id=principal.id)
    if principal.role is Role.VENDOR:
        return BookingScope(vendor_ids=principal.vendor_profile_ids)
    return BookingScope()


def paginate(page: int, limit: int, total: int) -> Pagination:
    return Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class BookingQueryService:
    def __init__(self, bookings: BookingStore):
        self.bookings = bookings

    async def list_bookings(
        self,
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[BookingStatus] = None,
        event_id: Optional[str] = None,
        vendor_id: Optional[str] = None,
    ) -> tuple[list[Booking], Pagination]:
        filters = BookingFilters(status=status, event_id=event_id, vendor_id=vendor_id)
        bookings, total = await self.bookings.list(
            scope_for(principal),
            filters,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return bookings, paginate(page, limit, total)

    async def get_booking(self, principal: Principal, booking_id: str) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")

        manager_id = booking.event.manager_id if booking.event is not None else None
        if not can_act(principal, Operation.READ, booking, manager_id):
            logger.warning("booking_read_denied", booking_id=booking_id, principal_id=principal.id)
            raise ForbiddenError()
        return booking

    async def get_stats(self, principal: Principal) -> BookingStatsResponse:
        """Stats overview, served from Redis when a fresh copy exists."""
        cached = await cache_service.get_cached_stats(principal.role.value, principal.id)
        if cached:
            return BookingStatsResponse(**cached)

        stats = await self.bookings.stats(scope_for(principal))
        response = BookingStatsResponse(
            total_bookings=stats.total_bookings,
            total_spent=stats.total_spent,
            pending_bookings=stats.by_status[BookingStatus.PENDING],
            confirmed_bookings=stats.by_status[BookingStatus.CONFIRMED],
            in_progress_bookings=stats.by_status[BookingStatus.IN_PROGRESS],
            completed_bookings=stats.by_status[BookingStatus.COMPLETED],
            cancelled_bookings=stats.by_status[BookingStatus.CANCELLED],
        )
        await cache_service.set_cached_stats(
            principal.role.value, principal.id, response.model_dump(mode="json")
        )
        return response
