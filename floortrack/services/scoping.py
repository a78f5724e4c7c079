"""
Resource Scoping Service.

Computes the rows a user may see on list endpoints with one query per
list. Scoped roles match with a semi-join: a row is visible when any
GlobalPermission for one of the user's groups touches its building (for
buildings) or its floor (for floors, APs and devices). Results are
ascending by id and free of duplicates.
"""

from __future__ import annotations

from typing import Mapping, Optional

import structlog
from sqlalchemy import Select, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from floortrack.core.roles import ADMIN_LIST_SCOPE, FLOOR_LIST_SCOPE, Role, Scope
from floortrack.models.building import AccessPoint, Building, Floor
from floortrack.models.device import ClientDevice
from floortrack.models.global_permission import GlobalPermission
from floortrack.services.identity import AppUser

logger = structlog.get_logger()


class ResourceScopingService:
    def _visible(self, user: AppUser, table: Mapping[Role, Scope]) -> Optional[bool]:
        """
        True when the user sees everything, False when they see nothing,
        None when the query must be restricted by grants.
        """
        scope = table[user.role]
        if scope is Scope.UNRESTRICTED:
            return True
        if scope is Scope.NONE:
            return False
        if scope is Scope.ANY_GRANT:
            return None if user.has_groups else False
        raise AssertionError(f"Unhandled list scope {scope}")

    def _granted(self, user: AppUser, *conditions):
        return exists().where(GlobalPermission.group_id.in_(user.group_ids), *conditions)

    async def _run(self, db: AsyncSession, query: Select, kind: str, user: AppUser) -> list:
        result = await db.execute(query)
        rows = list(result.scalars().all())
        logger.debug("Scoped list", kind=kind, uid=user.firebase_uid, role=user.role.value, count=len(rows))
        return rows

    async def list_buildings(self, db: AsyncSession, user: AppUser) -> list[Building]:
        visible = self._visible(user, ADMIN_LIST_SCOPE)
        if visible is False:
            return []

        query = select(Building).order_by(Building.id.asc())
        if visible is None:
            query = query.where(self._granted(user, GlobalPermission.building_id == Building.id))
        return await self._run(db, query, "buildings", user)

    async def list_floors(
        self,
        db: AsyncSession,
        user: AppUser,
        table: Mapping[Role, Scope] = ADMIN_LIST_SCOPE,
    ) -> list[Floor]:
        visible = self._visible(user, table)
        if visible is False:
            return []

        query = select(Floor).options(selectinload(Floor.building)).order_by(Floor.id.asc())
        if visible is None:
            query = query.where(self._granted(user, GlobalPermission.floor_id == Floor.id))
        return await self._run(db, query, "floors", user)

    async def list_browsable_floors(self, db: AsyncSession, user: AppUser) -> list[Floor]:
        """General floor listing, open to Viewers as well"""
        return await self.list_floors(db, user, FLOOR_LIST_SCOPE)

    async def list_access_points(self, db: AsyncSession, user: AppUser) -> list[AccessPoint]:
        visible = self._visible(user, ADMIN_LIST_SCOPE)
        if visible is False:
            return []

        query = (
            select(AccessPoint)
            .options(selectinload(AccessPoint.floor))
            .order_by(AccessPoint.id.asc())
        )
        if visible is None:
            query = query.where(self._granted(user, GlobalPermission.floor_id == AccessPoint.floor_id))
        return await self._run(db, query, "access_points", user)

    async def list_client_devices(self, db: AsyncSession, user: AppUser) -> list[ClientDevice]:
        visible = self._visible(user, ADMIN_LIST_SCOPE)
        if visible is False:
            return []

        query = (
            select(ClientDevice)
            .join(AccessPoint, AccessPoint.id == ClientDevice.ap_id)
            .options(selectinload(ClientDevice.access_point).selectinload(AccessPoint.floor))
            .order_by(ClientDevice.id.asc())
        )
        if visible is None:
            query = query.where(self._granted(user, GlobalPermission.floor_id == AccessPoint.floor_id))
        return await self._run(db, query, "client_devices", user)


resource_scoping_service = ResourceScopingService()
