"""
Device Repositories
Client devices and user-owned devices
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floortrack.core.identifiers import normalize_mac
from floortrack.models.building import AccessPoint
from floortrack.models.device import ClientDevice, UserOwnedDevice
from floortrack.repositories.base import CRUDBase


class ClientDeviceRepository(CRUDBase[ClientDevice]):
    async def get_with_access_point(self, db: AsyncSession, device_id: int) -> Optional[ClientDevice]:
        result = await db.execute(
            select(ClientDevice)
            .options(selectinload(ClientDevice.access_point))
            .where(ClientDevice.id == device_id)
        )
        return result.scalar_one_or_none()

    async def count_on_floor(self, db: AsyncSession, floor_id: int) -> int:
        result = await db.execute(
            select(func.count(ClientDevice.id))
            .join(AccessPoint, AccessPoint.id == ClientDevice.ap_id)
            .where(AccessPoint.floor_id == floor_id)
        )
        return result.scalar() or 0

    async def latest_sighting(self, db: AsyncSession, mac: str) -> Optional[ClientDevice]:
        """Most recently updated device with this MAC, compared case-insensitively"""
        result = await db.execute(
            select(ClientDevice)
            .options(selectinload(ClientDevice.access_point))
            .where(func.lower(ClientDevice.mac) == normalize_mac(mac))
            .order_by(ClientDevice.updated_at.desc(), ClientDevice.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


class UserOwnedDeviceRepository(CRUDBase[UserOwnedDevice]):
    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[UserOwnedDevice]:
        return await self.get_multi(db, filters={"user_id": user_id})


client_device_repository = ClientDeviceRepository(ClientDevice)
user_device_repository = UserOwnedDeviceRepository(UserOwnedDevice)
