"""
User Repository
Database operations for application users and their memberships
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floortrack.models.group import UserGroup
from floortrack.models.user import User
from floortrack.repositories.base import CRUDBase

logger = structlog.get_logger()


class UserRepository(CRUDBase[User]):
    def _with_access(self):
        return select(User).options(
            selectinload(User.role),
            selectinload(User.user_groups).selectinload(UserGroup.group),
        )

    async def get_by_firebase_uid(self, db: AsyncSession, firebase_uid: str) -> Optional[User]:
        """Load a user with role and group memberships eagerly"""
        result = await db.execute(self._with_access().where(User.firebase_uid == firebase_uid))
        return result.scalar_one_or_none()

    async def get_with_access(self, db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(self._with_access().where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower().strip()))
        return result.scalar_one_or_none()

    async def list_by_role(self, db: AsyncSession, role_id: int) -> list[User]:
        result = await db.execute(
            select(User)
            .where(User.role_id == role_id)
            .order_by(User.created_at.asc(), User.id.asc())
        )
        return list(result.scalars().all())


class UserGroupRepository:
    """Membership rows have a composite key, so they skip CRUDBase"""

    async def delete_for_user(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(delete(UserGroup).where(UserGroup.user_id == user_id))
        return result.rowcount or 0

    async def add_many(self, db: AsyncSession, user_id: int, group_ids: Sequence[int]) -> None:
        db.add_all([UserGroup(user_id=user_id, group_id=group_id) for group_id in group_ids])
        await db.flush()

    async def group_is_used(self, db: AsyncSession, group_id: int) -> bool:
        result = await db.execute(select(UserGroup.user_id).where(UserGroup.group_id == group_id).limit(1))
        return result.first() is not None


user_repository = UserRepository(User)
user_group_repository = UserGroupRepository()
