"""
SQLAlchemy-backed BookingStore.

All methods flush but never commit; the request-scoped session in
`db.session.get_db` owns the transaction.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventplanner.models.booking import Booking
from eventplanner.models.enums import ACTIVE_BOOKING_STATUSES, BookingStatus
from eventplanner.services.interfaces.stores import (
    BookingFilters,
    BookingScope,
    BookingStats,
    BookingStore,
)

_DETAIL_LOADERS = (
    selectinload(Booking.event),
    selectinload(Booking.vendor),
    selectinload(Booking.service),
    selectinload(Booking.customer),
)


def _apply_scope(query: Select, scope: BookingScope, filters: BookingFilters) -> Select:
    if scope.customer_id is not None:
        query = query.where(Booking.customer_id == scope.customer_id)
    if scope.vendor_ids is not None:
        query = query.where(Booking.vendor_id.in_(sorted(scope.vendor_ids)))

    if filters.status is not None:
        query = query.where(Booking.status == filters.status)
    if filters.event_id is not None:
        query = query.where(Booking.event_id == filters.event_id)
    if filters.vendor_id is not None:
        query = query.where(Booking.vendor_id == filters.vendor_id)
    return query


class SqlBookingStore(BookingStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return await self.get(booking.id)

    async def get(self, booking_id: str) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .options(*_DETAIL_LOADERS)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_active_in_slot(
        self,
        vendor_id: str,
        service_id: str,
        booking_date: date,
        exclude_booking_id: Optional[str] = None,
    ) -> Sequence[Booking]:
        # Uses ix_bookings_slot
        query = select(Booking).where(
            Booking.vendor_id == vendor_id,
            Booking.service_id == service_id,
            Booking.booking_date == booking_date,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_time.is_not(None),
            Booking.end_time.is_not(None),
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def save(self, booking: Booking) -> Booking:
        await self.db.flush()
        return await self.get(booking.id)

    async def delete(self, booking: Booking) -> None:
        await self.db.delete(booking)
        await self.db.flush()

    async def list(
        self,
        scope: BookingScope,
        filters: BookingFilters,
        offset: int,
        limit: int,
    ) -> tuple[list[Booking], int]:
        query = _apply_scope(select(Booking), scope, filters)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        page_query = (
            query
            .options(*_DETAIL_LOADERS)
            .order_by(Booking.booking_date.desc(), Booking.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(page_query)
        return list(result.scalars().all()), total

    async def stats(self, scope: BookingScope) -> BookingStats:
        columns = [
            func.count(Booking.id).label("total_bookings"),
            func.coalesce(func.sum(Booking.total_cost), 0).label("total_spent"),
        ]
        for status in BookingStatus:
            columns.append(
                func.count(case((Booking.status == status, 1))).label(status.value)
            )

        query = _apply_scope(select(*columns), scope, BookingFilters())
        row = (await self.db.execute(query)).one()
        mapping = row._mapping

        return BookingStats(
            total_bookings=mapping["total_bookings"] or 0,
            total_spent=Decimal(str(mapping["total_spent"] or 0)).quantize(Decimal("0.01")),
            by_status={status: mapping[status.value] or 0 for status in BookingStatus},
        )
