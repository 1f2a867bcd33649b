"""
SQLAlchemy-backed CatalogStore (read-only).
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventplanner.models.event import Event
from eventplanner.models.user import User
from eventplanner.models.vendor import VendorProfile, VendorService
from eventplanner.services.interfaces.stores import CatalogStore


class SqlCatalogStore(CatalogStore):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active_user(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def get_vendor_profile_ids_for_user(self, user_id: str) -> list[str]:
        result = await self.db.execute(
            select(VendorProfile.id).where(VendorProfile.user_id == user_id)
        )
        return list(result.scalars().all())

    async def get_event(self, event_id: str) -> Optional[Event]:
        return await self.db.get(Event, event_id)

    async def get_vendor(self, vendor_id: str) -> Optional[VendorProfile]:
        return await self.db.get(VendorProfile, vendor_id)

    async def get_service(self, service_id: str, for_update: bool = False) -> Optional[VendorService]:
        query = select(VendorService).where(VendorService.id == service_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
