"""
Unit tests for BookingService against in-memory stores.

These cover what the HTTP tests cannot observe on SQLite: whether the
service row lock is requested around the conflict check, how outcomes are
counted and what the engine logs.
"""

import uuid
from datetime import date, time
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from eventplanner.core.exceptions import SchedulingConflictError
from eventplanner.models.booking import Booking
from eventplanner.models.enums import ACTIVE_BOOKING_STATUSES, BookingStatus, PriceType, Role
from eventplanner.schemas.booking import BookingCreate
from eventplanner.services.booking_service import BookingService
from eventplanner.services.interfaces.stores import BookingStats, BookingStore, CatalogStore
from eventplanner.services.policy import Principal

BOOKING_DAY = date(2027, 3, 1)


class InMemoryBookingStore(BookingStore):
    def __init__(self):
        self.rows: dict[str, Booking] = {}

    async def add(self, booking):
        booking.id = booking.id or str(uuid.uuid4())
        self.rows[booking.id] = booking
        return booking

    async def get(self, booking_id):
        return self.rows.get(booking_id)

    async def find_active_in_slot(self, vendor_id, service_id, booking_date, exclude_booking_id=None):
        return [
            b for b in self.rows.values()
            if b.vendor_id == vendor_id
            and b.service_id == service_id
            and b.booking_date == booking_date
            and b.status in ACTIVE_BOOKING_STATUSES
            and b.id != exclude_booking_id
        ]

    async def save(self, booking):
        return booking

    async def delete(self, booking):
        self.rows.pop(booking.id, None)

    async def list(self, scope, filters, offset, limit):
        rows = list(self.rows.values())
        return rows[offset:offset + limit], len(rows)

    async def stats(self, scope):
        return BookingStats(
            total_bookings=len(self.rows),
            total_spent=sum((b.total_cost for b in self.rows.values()), Decimal("0.00")),
            by_status={status: 0 for status in BookingStatus},
        )


class RecordingCatalogStore(CatalogStore):
    """Serves one event, vendor and service and records lock requests."""

    def __init__(self, customer_id: str):
        self.event = SimpleNamespace(id=str(uuid.uuid4()), customer_id=customer_id, manager_id=None)
        self.vendor = SimpleNamespace(id=str(uuid.uuid4()), is_available=True)
        self.service = SimpleNamespace(
            id=str(uuid.uuid4()),
            vendor_id=self.vendor.id,
            is_available=True,
            capacity=None,
            base_price=Decimal("15.00"),
            price_type=PriceType.PER_HOUR,
        )
        self.service_lookups: list[bool] = []

    async def get_active_user(self, user_id):
        return None

    async def get_vendor_profile_ids_for_user(self, user_id):
        return []

    async def get_event(self, event_id):
        return self.event if event_id == self.event.id else None

    async def get_vendor(self, vendor_id):
        return self.vendor if vendor_id == self.vendor.id else None

    async def get_service(self, service_id, for_update=False):
        self.service_lookups.append(for_update)
        return self.service if service_id == self.service.id else None


CUSTOMER = Principal(id=str(uuid.uuid4()), role=Role.CUSTOMER)


def _request(catalog: RecordingCatalogStore, start: Optional[str], end: Optional[str]) -> BookingCreate:
    return BookingCreate(
        event_id=catalog.event.id,
        vendor_id=catalog.vendor.id,
        service_id=catalog.service.id,
        quantity=1,
        booking_date=BOOKING_DAY,
        start_time=start,
        end_time=end,
    )


def _engine(slot_locking: bool):
    bookings = InMemoryBookingStore()
    catalog = RecordingCatalogStore(CUSTOMER.id)
    return BookingService(bookings, catalog, slot_locking=slot_locking), bookings, catalog


@pytest.mark.asyncio
async def test_service_row_locked_when_window_given():
    engine, _, catalog = _engine(slot_locking=True)

    booking = await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))

    assert catalog.service_lookups == [True]
    assert booking.total_cost == Decimal("30.00")
    assert booking.status == BookingStatus.PENDING


@pytest.mark.asyncio
async def test_no_lock_without_window():
    engine, _, catalog = _engine(slot_locking=True)

    await engine.create_booking(CUSTOMER, _request(catalog, "09:00", None))

    assert catalog.service_lookups == [False]


@pytest.mark.asyncio
async def test_locking_can_be_disabled():
    engine, _, catalog = _engine(slot_locking=False)

    await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))

    assert catalog.service_lookups == [False]


@pytest.mark.asyncio
async def test_second_overlapping_request_is_rejected():
    engine, bookings, catalog = _engine(slot_locking=True)

    await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))
    with pytest.raises(SchedulingConflictError):
        await engine.create_booking(CUSTOMER, _request(catalog, "10:00", "12:00"))

    assert len(bookings.rows) == 1


@pytest.mark.asyncio
async def test_window_edit_locks_and_excludes_itself():
    engine, bookings, catalog = _engine(slot_locking=True)
    booking = await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))
    catalog.service_lookups.clear()

    updated = await engine.update_details(
        CUSTOMER, booking.id, {"start_time": time(10, 0), "end_time": time(12, 0)}
    )

    assert catalog.service_lookups == [True]
    assert updated.total_cost == Decimal("30.00")
    assert (updated.start_time, updated.end_time) == (time(10, 0), time(12, 0))


@pytest.mark.asyncio
async def test_requirements_edit_touches_no_catalog_row():
    engine, _, catalog = _engine(slot_locking=True)
    booking = await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))
    catalog.service_lookups.clear()

    updated = await engine.update_details(CUSTOMER, booking.id, {"special_requirements": "Quiet set"})

    assert catalog.service_lookups == []
    assert updated.special_requirements == "Quiet set"
    assert updated.total_cost == Decimal("30.00")


class BrokenBookingStore(InMemoryBookingStore):
    async def add(self, booking):
        raise RuntimeError("insert failed")


def _operation_count(operation: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "booking_operations_total", {"operation": operation, "outcome": outcome}
    )
    return value or 0.0


@pytest.mark.asyncio
async def test_unexpected_failures_are_counted():
    catalog = RecordingCatalogStore(CUSTOMER.id)
    engine = BookingService(BrokenBookingStore(), catalog, slot_locking=True)
    before = _operation_count("create", "error")

    with pytest.raises(RuntimeError):
        await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))

    assert _operation_count("create", "error") == before + 1


@pytest.mark.asyncio
async def test_domain_failures_are_counted_by_code():
    engine, _, catalog = _engine(slot_locking=True)
    await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))
    before = _operation_count("create", "scheduling_conflict")

    with pytest.raises(SchedulingConflictError):
        await engine.create_booking(CUSTOMER, _request(catalog, "10:00", "12:00"))

    assert _operation_count("create", "scheduling_conflict") == before + 1


@pytest.mark.asyncio
async def test_status_update_log_marks_terminal_states():
    engine, _, catalog = _engine(slot_locking=True)
    booking = await engine.create_booking(CUSTOMER, _request(catalog, "09:00", "11:00"))

    with capture_logs() as logs:
        await engine.update_status(CUSTOMER, booking.id, BookingStatus.CONFIRMED)
        await engine.update_status(CUSTOMER, booking.id, BookingStatus.CANCELLED)

    updates = [entry for entry in logs if entry["event"] == "booking_status_updated"]
    assert [(entry["to_status"], entry["terminal"]) for entry in updates] == [
        ("confirmed", False),
        ("cancelled", True),
    ]
