"""
Profile Service
Self-service profile, account deletion and AP-connection lookup
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.errors import ForbiddenError, NotFoundError, UnauthenticatedError
from floortrack.core.identifiers import normalize_mac
from floortrack.models.user import User
from floortrack.repositories.device import client_device_repository, user_device_repository
from floortrack.repositories.user import user_repository
from floortrack.schemas.access import GroupResponse, RoleResponse
from floortrack.schemas.profile import (
    ApConnection,
    ApConnectionsResponse,
    ConnectedAccessPoint,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdated,
    ProfileUser,
)
from floortrack.services.identity import AppUser
from floortrack.services.identity_provider import IdentityProvider
from floortrack.services.mutations import mutation_coordinator

logger = structlog.get_logger()


class ProfileService:
    async def _load(self, db: AsyncSession, user: AppUser) -> User:
        record = await user_repository.get_with_access(db, user.id)
        if record is None:
            raise UnauthenticatedError()
        return record

    async def get_profile(self, db: AsyncSession, user: AppUser) -> ProfileResponse:
        record = await self._load(db, user)
        return ProfileResponse(
            user=ProfileUser(
                id=record.id,
                email=record.email,
                first_name=record.first_name,
                last_name=record.last_name,
                role=RoleResponse.model_validate(record.role) if record.role else None,
                groups=[GroupResponse.model_validate(m.group) for m in record.user_groups],
            )
        )

    async def update_profile(self, db: AsyncSession, user: AppUser, data: ProfileUpdate) -> ProfileUpdated:
        record = await self._load(db, user)
        changes = data.model_dump(exclude_none=True)
        if changes:
            record = await user_repository.update(db, db_obj=record, obj_in=changes)
            logger.info("Profile updated", uid=user.firebase_uid, fields=sorted(changes))
        return ProfileUpdated.model_validate(record)

    async def delete_account(
        self,
        db: AsyncSession,
        provider: IdentityProvider,
        firebase_uid: str,
        id_token: Optional[str] = None,
    ) -> None:
        await mutation_coordinator.delete_account(db, provider, firebase_uid, id_token=id_token)
        logger.warning("Account deleted", uid=firebase_uid)

    async def ap_connections(self, db: AsyncSession, caller_uid: str, user_id: int) -> ApConnectionsResponse:
        """Where each of the user's registered MACs was last seen"""
        target = await user_repository.get(db, user_id)
        if target is None:
            raise NotFoundError("User not found")
        if target.firebase_uid != caller_uid:
            logger.warning("AP connection lookup forbidden: mismatched uid", uid=caller_uid, user_id=user_id)
            raise ForbiddenError()

        devices = await user_device_repository.list_for_user(db, user_id)
        if not devices:
            raise NotFoundError("User has no registered device MAC")

        connections = []
        for device in devices:
            mac = normalize_mac(device.mac)
            sighting = await client_device_repository.latest_sighting(db, mac)
            ap = sighting.access_point if sighting else None
            connections.append(
                ApConnection(
                    mac=mac,
                    ap=ConnectedAccessPoint(id=ap.id, name=ap.name, floor_id=ap.floor_id) if ap else None,
                    updated_at=sighting.updated_at if sighting else None,
                )
            )

        logger.info("AP connections resolved", uid=caller_uid, count=len(connections))
        return ApConnectionsResponse(connections=connections)


profile_service = ProfileService()
