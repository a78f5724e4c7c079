"""
Identity Resolver
Maps an external identity uid to the application user with role and groups
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.roles import Role
from floortrack.models.user import User
from floortrack.repositories.user import user_repository

logger = structlog.get_logger()


@dataclass(frozen=True)
class AppUser:
    """Request-scoped snapshot of the caller; never written back"""

    id: int
    firebase_uid: str
    email: str
    first_name: str
    last_name: str
    role: Role
    role_id: int
    group_ids: tuple[int, ...]

    @property
    def has_groups(self) -> bool:
        return bool(self.group_ids)

    @property
    def first_group_id(self) -> Optional[int]:
        """Lowest group id, the stable choice for seeding grants"""
        return min(self.group_ids) if self.group_ids else None

    @classmethod
    def from_model(cls, user: User) -> "AppUser":
        return cls(
            id=user.id,
            firebase_uid=user.firebase_uid,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role_name,
            role_id=user.role_id,
            group_ids=tuple(user.group_ids),
        )


class IdentityResolver:
    async def resolve(self, db: AsyncSession, external_uid: str) -> Optional[AppUser]:
        """None when no application user is bound to the uid"""
        user = await user_repository.get_by_firebase_uid(db, external_uid)
        if user is None:
            logger.info("No application user for identity", uid=external_uid)
            return None
        app_user = AppUser.from_model(user)
        logger.debug("Identity resolved", uid=external_uid, user_id=app_user.id, role=app_user.role.value)
        return app_user


identity_resolver = IdentityResolver()
