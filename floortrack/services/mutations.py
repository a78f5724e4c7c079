"""
Mutation Coordinator.

Multi-row writes that must be applied all together or not at all:
floor creation with its seeding grant, pending-user assignment, and
account deletion. Each group runs inside ``atomic`` so a failure at any
step rolls the whole group back.
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import atomic
from floortrack.core.errors import AppError
from floortrack.models.building import Floor
from floortrack.models.user import User
from floortrack.repositories.building import floor_repository
from floortrack.repositories.device import user_device_repository
from floortrack.repositories.global_permission import global_permission_repository
from floortrack.repositories.user import user_group_repository, user_repository
from floortrack.services.identity import AppUser
from floortrack.services.identity_provider import IdentityProvider

logger = structlog.get_logger()


class MutationCoordinator:
    async def create_floor(
        self,
        db: AsyncSession,
        creator: AppUser,
        *,
        name: str,
        svg_map: str,
        building_id: int,
    ) -> Floor:
        """Insert a floor and, when the creator has a group, a grant binding it to that group"""
        seed_group_id = creator.first_group_id

        async with atomic(db):
            floor = await floor_repository.create(
                db,
                obj_in={"name": name, "svg_map": svg_map, "building_id": building_id},
                commit=False,
            )
            if seed_group_id is not None:
                await global_permission_repository.create(
                    db,
                    obj_in={"group_id": seed_group_id, "building_id": building_id, "floor_id": floor.id},
                    commit=False,
                )

        logger.info(
            "Floor created",
            floor_id=floor.id,
            building_id=building_id,
            seed_group_id=seed_group_id,
            uid=creator.firebase_uid,
        )
        return floor

    async def assign_pending_user(
        self,
        db: AsyncSession,
        user: User,
        *,
        role_id: int,
        group_ids: Sequence[int],
    ) -> User:
        """Set the role and replace the whole membership set in one transaction"""
        async with atomic(db):
            await user_repository.update(db, db_obj=user, obj_in={"role_id": role_id}, commit=False)
            await user_group_repository.delete_for_user(db, user.id)
            await user_group_repository.add_many(db, user.id, group_ids)

        logger.info("User assigned", user_id=user.id, role_id=role_id, group_ids=list(group_ids))
        return user

    async def delete_account(
        self,
        db: AsyncSession,
        provider: IdentityProvider,
        firebase_uid: str,
        *,
        id_token: Optional[str] = None,
    ) -> None:
        """
        Remove memberships, owned devices and the user row atomically, then
        ask the provider to delete the identity.

        The provider call happens after commit and never fails the
        operation; a failure leaves an orphaned identity that is logged.
        """
        user = await user_repository.get_by_firebase_uid(db, firebase_uid)
        if user is not None:
            user_id = user.id
            async with atomic(db):
                await user_group_repository.delete_for_user(db, user_id)
                await user_device_repository.delete_where(db, filters={"user_id": user_id})
                await user_repository.delete_where(db, filters={"id": user_id})
            logger.warning("Account rows deleted", user_id=user_id, uid=firebase_uid)
        else:
            logger.warning("Account deletion without application user", uid=firebase_uid)

        try:
            await provider.delete_identity(firebase_uid, id_token=id_token)
        except AppError as exc:
            logger.error(
                "Identity deletion failed after account removal; identity is orphaned",
                uid=firebase_uid,
                error=exc.message,
            )


mutation_coordinator = MutationCoordinator()
