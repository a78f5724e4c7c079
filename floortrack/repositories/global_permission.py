"""
GlobalPermission Repository
Grant lookups used by the permission evaluator and the admin listing
"""

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floortrack.models.global_permission import GlobalPermission
from floortrack.repositories.base import CRUDBase


class GlobalPermissionRepository(CRUDBase[GlobalPermission]):
    async def grant_exists(
        self,
        db: AsyncSession,
        *,
        group_ids: Sequence[int],
        building_id: Optional[int] = None,
        floor_id: Optional[int] = None,
    ) -> bool:
        """True when some grant for one of ``group_ids`` names the building and/or floor"""
        query = select(GlobalPermission.id).where(GlobalPermission.group_id.in_(list(group_ids)))
        if building_id is not None:
            query = query.where(GlobalPermission.building_id == building_id)
        if floor_id is not None:
            query = query.where(GlobalPermission.floor_id == floor_id)

        result = await db.execute(query.limit(1))
        return result.first() is not None

    async def list_detailed(self, db: AsyncSession, group_ids: Optional[Sequence[int]] = None) -> list[GlobalPermission]:
        """Grants with group, building and floor loaded; all grants when group_ids is None"""
        query = select(GlobalPermission).options(
            selectinload(GlobalPermission.group),
            selectinload(GlobalPermission.building),
            selectinload(GlobalPermission.floor),
        )
        if group_ids is not None:
            query = query.where(GlobalPermission.group_id.in_(list(group_ids)))

        result = await db.execute(query.order_by(GlobalPermission.id.asc()))
        return list(result.scalars().all())

    async def get_detailed(self, db: AsyncSession, permission_id: int) -> Optional[GlobalPermission]:
        result = await db.execute(
            select(GlobalPermission)
            .options(
                selectinload(GlobalPermission.group),
                selectinload(GlobalPermission.building),
                selectinload(GlobalPermission.floor),
            )
            .where(GlobalPermission.id == permission_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


global_permission_repository = GlobalPermissionRepository(GlobalPermission)
