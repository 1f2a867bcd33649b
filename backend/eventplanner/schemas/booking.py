"""
Pydantic schemas for booking request/response validation.
"""

import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from eventplanner.models.enums import BookingStatus, PriceType, VendorType

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$")


def parse_time_of_day(value: Any) -> Any:
    """Accept "HH:MM" (or "HH:MM:SS") strings in 24h format."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, str):
        match = TIME_PATTERN.match(value.strip())
        if match:
            hour, minute, second = match.groups()
            return time(int(hour), int(minute), int(second or 0))
    raise ValueError("Invalid time format, expected HH:MM")


def _strip_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()


class BookingCreate(BaseModel):
    event_id: UUID
    vendor_id: UUID
    service_id: UUID
    quantity: int = Field(..., ge=1)
    booking_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    special_requirements: Optional[str] = Field(None, max_length=2000)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_times(cls, value: Any) -> Any:
        return parse_time_of_day(value)

    @field_validator("special_requirements")
    @classmethod
    def strip_requirements(cls, value: Optional[str]) -> Optional[str]:
        return _strip_text(value)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingDetailsUpdate(BaseModel):
    """
    Partial update. Only fields present in the request body are applied;
    times and special requirements may be cleared by sending null.
    """

    quantity: Optional[int] = Field(None, ge=1)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    special_requirements: Optional[str] = Field(None, max_length=2000)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_times(cls, value: Any) -> Any:
        return parse_time_of_day(value)

    @field_validator("special_requirements")
    @classmethod
    def strip_requirements(cls, value: Optional[str]) -> Optional[str]:
        return _strip_text(value)

    @model_validator(mode="after")
    def quantity_not_null(self) -> "BookingDetailsUpdate":
        if "quantity" in self.model_fields_set and self.quantity is None:
            raise ValueError("quantity cannot be null")
        return self

    def provided(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class BookingResponse(BaseModel):
    id: str
    event_id: str
    vendor_id: str
    service_id: str
    customer_id: str
    quantity: int
    unit_price: Decimal
    price_type: PriceType
    total_cost: Decimal
    booking_date: date
    start_time: Optional[time]
    end_time: Optional[time]
    special_requirements: Optional[str]
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    # Joined catalog data
    event_title: Optional[str] = None
    event_date: Optional[datetime] = None
    event_location: Optional[str] = None
    vendor_name: Optional[str] = None
    vendor_type: Optional[VendorType] = None
    service_name: Optional[str] = None
    customer_first_name: Optional[str] = None
    customer_last_name: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: Optional[time]) -> Optional[str]:
        # Seconds are only printed when set, so echoed times parse back unchanged
        if value is None:
            return None
        return value.strftime("%H:%M:%S" if value.second else "%H:%M")

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        response = cls.model_validate(booking)
        updates: dict[str, Any] = {}
        if booking.event is not None:
            updates.update(
                event_title=booking.event.title,
                event_date=booking.event.start_date,
                event_location=booking.event.location,
            )
        if booking.vendor is not None:
            updates.update(vendor_name=booking.vendor.business_name, vendor_type=booking.vendor.vendor_type)
        if booking.service is not None:
            updates["service_name"] = booking.service.service_name
        if booking.customer is not None:
            updates.update(
                customer_first_name=booking.customer.first_name,
                customer_last_name=booking.customer.last_name,
            )
        return response.model_copy(update=updates)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    pagination: Pagination


class BookingEnvelope(BaseModel):
    message: Optional[str] = None
    booking: BookingResponse


class BookingDeleteResponse(BaseModel):
    message: str
    booking_id: str


class BookingStatsResponse(BaseModel):
    total_bookings: int
    total_spent: Decimal
    pending_bookings: int
    confirmed_bookings: int
    in_progress_bookings: int
    completed_bookings: int
    cancelled_bookings: int


class BookingStatsEnvelope(BaseModel):
    stats: BookingStatsResponse
