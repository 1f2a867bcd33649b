"""
Booking endpoints.
"""

from typing import Literal, Optional, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventplanner.api.deps import get_booking_query_service, get_booking_service
from eventplanner.core.config import get_settings
from eventplanner.core.logging import get_logger
from eventplanner.core.security import get_current_principal
from eventplanner.db.session import get_db
from eventplanner.models.enums import BookingStatus
from eventplanner.schemas.booking import (
    BookingCreate,
    BookingDeleteResponse,
    BookingDetailsUpdate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatsEnvelope,
    BookingStatusUpdate,
)
from eventplanner.services.booking_query_service import BookingQueryService
from eventplanner.services.booking_service import BookingService
from eventplanner.services.cache_service import invalidate_stats_cache
from eventplanner.services.policy import Principal

logger = get_logger(__name__)
settings = get_settings()
router = APIRouter(prefix="/bookings", tags=["Bookings"])


async def _commit_mutation(db: AsyncSession) -> None:
    """Commit the request's write, then drop cached stats overviews.

    Stats must only be invalidated once the write is visible to other
    sessions, or a concurrent stats read re-caches the old rows.
    """
    await db.commit()
    await invalidate_stats_cache()


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status_filter: Optional[Union[BookingStatus, Literal["all"]]] = Query(None, alias="status"),
    event_id: Optional[UUID] = Query(None),
    vendor_id: Optional[UUID] = Query(None),
    principal: Principal = Depends(get_current_principal),
    queries: BookingQueryService = Depends(get_booking_query_service),
):
    """
    List bookings visible to the caller, newest booking day first.
    `status=all` is the same as omitting the status filter.
    """
    bookings, pagination = await queries.list_bookings(
        principal,
        page=page,
        limit=limit,
        status=None if status_filter in (None, "all") else BookingStatus(status_filter),
        event_id=str(event_id) if event_id else None,
        vendor_id=str(vendor_id) if vendor_id else None,
    )
    return BookingListResponse(
        bookings=[BookingResponse.from_booking(b) for b in bookings],
        pagination=pagination,
    )


@router.get("/stats/overview", response_model=BookingStatsEnvelope)
async def booking_stats(
    principal: Principal = Depends(get_current_principal),
    queries: BookingQueryService = Depends(get_booking_query_service),
):
    """Booking counts per status and total cost over the caller's bookings."""
    stats = await queries.get_stats(principal)
    return BookingStatsEnvelope(stats=stats)


@router.get("/{booking_id}", response_model=BookingEnvelope)
async def get_booking(
    booking_id: UUID,
    principal: Principal = Depends(get_current_principal),
    queries: BookingQueryService = Depends(get_booking_query_service),
):
    booking = await queries.get_booking(principal, str(booking_id))
    return BookingEnvelope(booking=BookingResponse.from_booking(booking))


@router.post("/", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
    db: AsyncSession = Depends(get_db),
):
    """
    Book a vendor service for one of the caller's events.

    The price is snapshotted from the service and the booking starts out
    pending. Overlapping active bookings for the same service and day are
    rejected.
    """
    booking = await service.create_booking(principal, booking_data)
    await _commit_mutation(db)
    return BookingEnvelope(
        message="Booking created successfully",
        booking=BookingResponse.from_booking(booking),
    )


@router.patch("/{booking_id}/status", response_model=BookingEnvelope)
async def update_booking_status(
    booking_id: UUID,
    body: BookingStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
    db: AsyncSession = Depends(get_db),
):
    booking = await service.update_status(principal, str(booking_id), body.status)
    await _commit_mutation(db)
    return BookingEnvelope(
        message="Booking status updated successfully",
        booking=BookingResponse.from_booking(booking),
    )


@router.put("/{booking_id}", response_model=BookingEnvelope)
async def update_booking(
    booking_id: UUID,
    body: BookingDetailsUpdate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
    db: AsyncSession = Depends(get_db),
):
    """Edit quantity, time window or special requirements of a pending booking."""
    booking = await service.update_details(principal, str(booking_id), body.provided())
    await _commit_mutation(db)
    return BookingEnvelope(
        message="Booking updated successfully",
        booking=BookingResponse.from_booking(booking),
    )


@router.delete("/{booking_id}", response_model=BookingDeleteResponse)
async def delete_booking(
    booking_id: UUID,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
    db: AsyncSession = Depends(get_db),
):
    """Delete a pending booking."""
    deleted_id = await service.delete_booking(principal, str(booking_id))
    await _commit_mutation(db)
    return BookingDeleteResponse(message="Booking deleted successfully", booking_id=deleted_id)
