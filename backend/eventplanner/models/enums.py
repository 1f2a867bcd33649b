"""
Closed vocabularies shared by the models, the policy and the API schemas.
"""

import enum


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    MANAGER = "manager"
    ADMIN = "admin"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Bookings in these states hold their time slot.
ACTIVE_BOOKING_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
)


class PriceType(str, enum.Enum):
    PER_PERSON = "per_person"
    PER_HOUR = "per_hour"
    PER_EVENT = "per_event"
    PER_MEAL = "per_meal"


class VendorType(str, enum.Enum):
    CATERER = "caterer"
    PHOTOGRAPHER = "photographer"
    DECORATOR = "decorator"
    MUSICIAN = "musician"
    TRANSPORT = "transport"
    OTHER = "other"


class EventType(str, enum.Enum):
    WEDDING = "wedding"
    BIRTHDAY = "birthday"
    CORPORATE = "corporate"
    OTHER = "other"


class EventStatus(str, enum.Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]
