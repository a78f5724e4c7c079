"""
Group Repository
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.models.group import Group
from floortrack.repositories.base import CRUDBase


class GroupRepository(CRUDBase[Group]):
    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Group]:
        result = await db.execute(select(Group).where(Group.name == name))
        return result.scalar_one_or_none()


group_repository = GroupRepository(Group)
