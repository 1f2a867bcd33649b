"""
Customer event that vendor services are booked for.

- `customer_id` is the owning customer; only they may book services for it
- `manager_id` is the optionally assigned manager, who may act on its bookings
"""

from sqlalchemy import Column, String, Text, Integer, Numeric, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship

from eventplanner.db.base import Base, TimestampMixin
from eventplanner.models.enums import EventStatus, EventType, enum_values
from eventplanner.models.user import new_id


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(
        Enum(EventType, name="event_type", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
        default=EventType.OTHER,
    )
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=True)
    max_guests = Column(Integer, nullable=True)
    budget = Column(Numeric(10, 2), nullable=True)
    status = Column(
        Enum(EventStatus, name="event_status", native_enum=False, values_callable=enum_values, length=20),
        nullable=False,
        default=EventStatus.PLANNING,
    )
    customer_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    manager_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    customer = relationship("User", foreign_keys=[customer_id])
    manager = relationship("User", foreign_keys=[manager_id])
    bookings = relationship("Booking", back_populates="event")

    __table_args__ = (
        Index("ix_events_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, customer={self.customer_id})>"
