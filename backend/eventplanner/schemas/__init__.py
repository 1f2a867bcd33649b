from eventplanner.schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingDetailsUpdate,
    BookingResponse,
    BookingListResponse,
    BookingEnvelope,
    BookingDeleteResponse,
    BookingStatsResponse,
    BookingStatsEnvelope,
    Pagination,
)

__all__ = [
    "BookingCreate", "BookingStatusUpdate", "BookingDetailsUpdate",
    "BookingResponse", "BookingListResponse", "BookingEnvelope",
    "BookingDeleteResponse", "BookingStatsResponse", "BookingStatsEnvelope",
    "Pagination",
]
