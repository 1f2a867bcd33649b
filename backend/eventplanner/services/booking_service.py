"""
Booking engine: creation, status transitions, detail edits and deletion.

CONCURRENCY STRATEGY: Service-row lock around the conflict check
================================================================

Problem:
  Two customers request overlapping windows on the same service and day.
  Both run the overlap query, both see no conflict, both insert.
  Result: Double-booking.

Solution:
  Before looking for overlapping bookings we load the service row with
  SELECT ... FOR UPDATE. The lock is held until the request's transaction
  commits, so a second request for the same service blocks on that SELECT
  and then sees the first booking when it runs the overlap query.

  This approach:
  - Only serializes requests for the same service, other services proceed
  - Needs no schema support (an exclusion constraint would be Postgres-only)
  - Can be switched off with BOOKING_SLOT_LOCKING=false, which falls back to
    plain check-then-insert and accepts the race

Alternative approaches considered:
  - Unique index on (vendor, service, date, start, end): only catches exact
    duplicates, not partial overlaps.
  - SERIALIZABLE isolation: correct, but every conflict surfaces as a
    serialization failure that would need a retry loop.
"""

import functools
from typing import Any, Optional

from eventplanner.core.config import get_settings
from eventplanner.core.exceptions import (
    BookingDomainError,
    CapacityExceededError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    SchedulingConflictError,
    UnavailableError,
)
from eventplanner.core.logging import get_logger
from eventplanner.core.metrics import (
    booking_create_latency,
    record_booking_operation,
    scheduling_conflicts,
)
from eventplanner.db.base import utcnow
from eventplanner.models.booking import Booking
from eventplanner.models.enums import BookingStatus
from eventplanner.models.vendor import VendorService
from eventplanner.schemas.booking import BookingCreate
from eventplanner.services.interfaces.stores import BookingStore, CatalogStore
from eventplanner.services.policy import Operation, Principal, can_act, is_booking_party
from eventplanner.services.pricing import calculate_cost, validate_time_window
from eventplanner.services.scheduling import find_conflict
from eventplanner.services.state_machine import is_terminal, validate_transition

logger = get_logger(__name__)


def instrumented(operation: str):
    """Count each call by outcome: "success", the domain error code, or "error"."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                result = await func(*args, **kwargs)
            except BookingDomainError as e:
                record_booking_operation(operation, e.error_code)
                raise
            except Exception:
                record_booking_operation(operation, "error")
                raise
            record_booking_operation(operation)
            return result

        return wrapper

    return decorator


def _event_manager_id(booking: Booking) -> Optional[str]:
    return booking.event.manager_id if booking.event is not None else None


class BookingService:
    def __init__(
        self,
        bookings: BookingStore,
        catalog: CatalogStore,
        slot_locking: Optional[bool] = None,
    ):
        self.bookings = bookings
        self.catalog = catalog
        if slot_locking is None:
            slot_locking = get_settings().BOOKING_SLOT_LOCKING
        self.slot_locking = slot_locking

    async def _load(self, booking_id: str) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    async def _ensure_slot_free(
        self,
        booking_date,
        vendor_id: str,
        service_id: str,
        start_time,
        end_time,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        existing = await self.bookings.find_active_in_slot(
            vendor_id, service_id, booking_date, exclude_booking_id=exclude_booking_id
        )
        conflict = find_conflict(existing, start_time, end_time)
        if conflict is not None:
            scheduling_conflicts.inc()
            logger.warning(
                "booking_conflict",
                service_id=service_id,
                booking_date=str(booking_date),
                requested=f"{start_time}-{end_time}",
                conflicting_booking_id=conflict.id,
            )
            raise SchedulingConflictError()

    @instrumented("create")
    async def create_booking(self, principal: Principal, data: BookingCreate) -> Booking:
        """
        Validate, price and persist a new pending booking.
        Checks run in a fixed order and the first failure wins.
        """
        if not can_act(principal, Operation.CREATE):
            raise ForbiddenError("Only customers can create bookings")

        with booking_create_latency.time():
            event = await self.catalog.get_event(str(data.event_id))
            if event is None or event.customer_id != principal.id:
                raise NotFoundError("Event not found")

            vendor = await self.catalog.get_vendor(str(data.vendor_id))
            if vendor is None:
                raise NotFoundError("Vendor not found")
            if not vendor.is_available:
                raise UnavailableError("Vendor is not available")

            has_window = data.start_time is not None and data.end_time is not None
            service = await self.catalog.get_service(
                str(data.service_id),
                for_update=self.slot_locking and has_window,
            )
            if service is None or service.vendor_id != vendor.id:
                raise NotFoundError("Service not found")
            if not service.is_available:
                raise UnavailableError("Service is not available")

            if service.capacity is not None and data.quantity > service.capacity:
                logger.warning(
                    "booking_capacity_exceeded",
                    service_id=service.id,
                    requested=data.quantity,
                    capacity=service.capacity,
                )
                raise CapacityExceededError(service.capacity)

            validate_time_window(data.start_time, data.end_time)
            total_cost = calculate_cost(
                service.base_price,
                service.price_type,
                data.quantity,
                data.start_time,
                data.end_time,
            )

            if has_window:
                await self._ensure_slot_free(
                    data.booking_date, vendor.id, service.id, data.start_time, data.end_time
                )

            booking = await self.bookings.add(
                Booking(
                    event_id=event.id,
                    vendor_id=vendor.id,
                    service_id=service.id,
                    customer_id=principal.id,
                    quantity=data.quantity,
                    unit_price=service.base_price,
                    price_type=service.price_type,
                    total_cost=total_cost,
                    booking_date=data.booking_date,
                    start_time=data.start_time,
                    end_time=data.end_time,
                    special_requirements=data.special_requirements,
                    status=BookingStatus.PENDING,
                )
            )

        logger.info(
            "booking_created",
            booking_id=booking.id,
            customer_id=principal.id,
            event_id=booking.event_id,
            service_id=booking.service_id,
            quantity=booking.quantity,
            total_cost=str(booking.total_cost),
        )
        return booking

    @instrumented("update_status")
    async def update_status(
        self,
        principal: Principal,
        booking_id: str,
        requested: BookingStatus,
    ) -> Booking:
        booking = await self._load(booking_id)

        if not can_act(principal, Operation.UPDATE_STATUS, booking, _event_manager_id(booking)):
            raise ForbiddenError()

        validate_transition(booking.status, requested)

        previous = booking.status
        booking.status = BookingStatus(requested)
        booking.updated_at = utcnow()
        booking = await self.bookings.save(booking)

        logger.info(
            "booking_status_updated",
            booking_id=booking.id,
            from_status=previous.value,
            to_status=booking.status.value,
            terminal=is_terminal(booking.status),
            actor_id=principal.id,
            actor_role=principal.role.value,
        )
        return booking

    @instrumented("update_details")
    async def update_details(
        self,
        principal: Principal,
        booking_id: str,
        changes: dict[str, Any],
    ) -> Booking:
        """
        Apply a partial edit to a pending booking.

        `changes` holds only the fields the caller sent; a key mapped to None
        clears that field. Cost is recomputed from the booking's own price
        snapshot whenever quantity or the time window changes.
        """
        booking = await self._load(booking_id)

        if not can_act(principal, Operation.UPDATE_DETAILS, booking):
            if is_booking_party(principal, booking):
                raise InvalidStateError(booking.status.value, "update")
            raise ForbiddenError()

        quantity = changes.get("quantity", booking.quantity)
        start_time = changes["start_time"] if "start_time" in changes else booking.start_time
        end_time = changes["end_time"] if "end_time" in changes else booking.end_time

        quantity_changed = quantity != booking.quantity
        window_changed = (start_time, end_time) != (booking.start_time, booking.end_time)

        validate_time_window(start_time, end_time)

        service: Optional[VendorService] = None
        has_window = start_time is not None and end_time is not None
        if quantity_changed or (window_changed and has_window):
            service = await self.catalog.get_service(
                booking.service_id,
                for_update=self.slot_locking and window_changed and has_window,
            )

        if quantity_changed and service is not None and service.capacity is not None:
            if quantity > service.capacity:
                raise CapacityExceededError(service.capacity)

        if window_changed and has_window:
            await self._ensure_slot_free(
                booking.booking_date,
                booking.vendor_id,
                booking.service_id,
                start_time,
                end_time,
                exclude_booking_id=booking.id,
            )

        booking.quantity = quantity
        booking.start_time = start_time
        booking.end_time = end_time
        if "special_requirements" in changes:
            booking.special_requirements = changes["special_requirements"]
        if quantity_changed or window_changed:
            booking.total_cost = calculate_cost(
                booking.unit_price, booking.price_type, quantity, start_time, end_time
            )
        booking.updated_at = utcnow()
        booking = await self.bookings.save(booking)

        logger.info(
            "booking_updated",
            booking_id=booking.id,
            fields=sorted(changes),
            total_cost=str(booking.total_cost),
        )
        return booking

    @instrumented("delete")
    async def delete_booking(self, principal: Principal, booking_id: str) -> str:
        """Physically remove a booking; only allowed while it is pending."""
        booking = await self._load(booking_id)

        if not can_act(principal, Operation.DELETE, booking, _event_manager_id(booking)):
            raise ForbiddenError()

        if booking.status != BookingStatus.PENDING:
            raise InvalidStateError(booking.status.value, "delete")

        await self.bookings.delete(booking)

        logger.info("booking_deleted", booking_id=booking_id, actor_id=principal.id)
        return booking_id
