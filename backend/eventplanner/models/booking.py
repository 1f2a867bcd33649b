"""
Booking model: a customer's reservation of one vendor service for one event.

Key design decisions:
- `unit_price` and `price_type` are snapshots of the service at booking time,
  so later catalog price changes never touch existing bookings
- `total_cost` is stored, derived from the snapshot by the pricing rule
- Status changes are logical; rows are only deleted while still pending
- `ix_bookings_slot` backs the scheduling-conflict lookup
"""

from sqlalchemy import (
    Column, String, Text, Integer, Numeric, Date, Time, ForeignKey, Enum, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from eventplanner.db.base import Base, TimestampMixin
from eventplanner.models.enums import BookingStatus, PriceType, enum_values
from eventplanner.models.user import new_id


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("vendor_profiles.id"), nullable=False, index=True)
    service_id = Column(String(36), ForeignKey("vendor_services.id"), nullable=False)
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False)
    price_type = Column(
        Enum(PriceType, name="booking_price_type", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
    )
    total_cost = Column(Numeric(10, 2), nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    special_requirements = Column(Text, nullable=True)
    status = Column(
        Enum(BookingStatus, name="booking_status", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    event = relationship("Event", back_populates="bookings")
    vendor = relationship("VendorProfile")
    service = relationship("VendorService")
    customer = relationship("User")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
        CheckConstraint("total_cost >= 0", name="check_booking_total_cost_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'in_progress', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
        Index("ix_bookings_slot", "vendor_id", "service_id", "booking_date"),
        Index("ix_bookings_date_created", "booking_date", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, service={self.service_id}, status={self.status})>"
