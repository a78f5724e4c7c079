"""
Location Repositories
Buildings, floors and access points
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floortrack.models.building import AccessPoint, Building, Floor
from floortrack.models.device import ClientDevice
from floortrack.repositories.base import CRUDBase


class BuildingRepository(CRUDBase[Building]):
    pass


class FloorRepository(CRUDBase[Floor]):
    async def get_with_building(self, db: AsyncSession, floor_id: int) -> Optional[Floor]:
        result = await db.execute(
            select(Floor).options(selectinload(Floor.building)).where(Floor.id == floor_id)
        )
        return result.scalar_one_or_none()

    async def get_building_id(self, db: AsyncSession, floor_id: int) -> Optional[int]:
        """Parent building of a floor, or None when the floor does not exist"""
        result = await db.execute(select(Floor.building_id).where(Floor.id == floor_id))
        return result.scalar_one_or_none()


class AccessPointRepository(CRUDBase[AccessPoint]):
    async def device_counts_for_floor(self, db: AsyncSession, floor_id: int) -> list[tuple[AccessPoint, int]]:
        """APs on a floor with their attached device count, ascending id"""
        device_count = func.count(ClientDevice.id)
        result = await db.execute(
            select(AccessPoint, device_count)
            .outerjoin(ClientDevice, ClientDevice.ap_id == AccessPoint.id)
            .where(AccessPoint.floor_id == floor_id)
            .group_by(AccessPoint.id)
            .order_by(AccessPoint.id.asc())
        )
        return [(ap, count) for ap, count in result.all()]


building_repository = BuildingRepository(Building)
floor_repository = FloorRepository(Floor)
access_point_repository = AccessPointRepository(AccessPoint)
