"""
Role Repository
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.models.role import Role
from floortrack.repositories.base import CRUDBase


class RoleRepository(CRUDBase[Role]):
    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Role]:
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()


role_repository = RoleRepository(Role)
