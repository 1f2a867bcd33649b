"""
Persistence interfaces for the booking subsystem.

The booking engine and query service depend on these abstractions only; the
SQLAlchemy implementations live in `eventplanner.repositories`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from eventplanner.models.booking import Booking
from eventplanner.models.enums import BookingStatus
from eventplanner.models.event import Event
from eventplanner.models.user import User
from eventplanner.models.vendor import VendorProfile, VendorService


@dataclass(frozen=True)
class BookingScope:
    """
    Role-derived visibility restriction.
    `None` on a field means no restriction on that column.
    """

    customer_id: Optional[str] = None
    vendor_ids: Optional[frozenset[str]] = None


@dataclass(frozen=True)
class BookingFilters:
    status: Optional[BookingStatus] = None
    event_id: Optional[str] = None
    vendor_id: Optional[str] = None


@dataclass(frozen=True)
class BookingStats:
    total_bookings: int
    total_spent: Decimal
    by_status: dict[BookingStatus, int]


class BookingStore(ABC):
    """Writes and reads booking rows."""

    @abstractmethod
    async def add(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get(self, booking_id: str) -> Optional[Booking]:
        """Load a booking with its event, vendor, service and customer."""
        pass

    @abstractmethod
    async def find_active_in_slot(
        self,
        vendor_id: str,
        service_id: str,
        booking_date: date,
        exclude_booking_id: Optional[str] = None,
    ) -> Sequence[Booking]:
        """Active bookings holding a time window for the given service on the given day."""
        pass

    @abstractmethod
    async def save(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def delete(self, booking: Booking) -> None:
        pass

    @abstractmethod
    async def list(
        self,
        scope: BookingScope,
        filters: BookingFilters,
        offset: int,
        limit: int,
    ) -> tuple[list[Booking], int]:
        pass

    @abstractmethod
    async def stats(self, scope: BookingScope) -> BookingStats:
        pass


class CatalogStore(ABC):
    """Read-only access to users, events, vendors and services."""

    @abstractmethod
    async def get_active_user(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_vendor_profile_ids_for_user(self, user_id: str) -> list[str]:
        pass

    @abstractmethod
    async def get_event(self, event_id: str) -> Optional[Event]:
        pass

    @abstractmethod
    async def get_vendor(self, vendor_id: str) -> Optional[VendorProfile]:
        pass

    @abstractmethod
    async def get_service(self, service_id: str, for_update: bool = False) -> Optional[VendorService]:
        """Load a service; `for_update` takes a row lock for the rest of the transaction."""
        pass
