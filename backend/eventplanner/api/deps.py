"""
FastAPI dependencies that assemble the booking services for one request.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventplanner.db.session import get_db
from eventplanner.repositories import SqlBookingStore, SqlCatalogStore
from eventplanner.services.booking_query_service import BookingQueryService
from eventplanner.services.booking_service import BookingService


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    return BookingService(SqlBookingStore(db), SqlCatalogStore(db))


def get_booking_query_service(db: AsyncSession = Depends(get_db)) -> BookingQueryService:
    return BookingQueryService(SqlBookingStore(db))
