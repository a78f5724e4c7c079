"""
Tests for group, GlobalPermission and pending-user administration
"""

import pytest

from floortrack.core.errors import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from floortrack.core.roles import Role
from floortrack.schemas.access import (
    AssignPendingUserRequest,
    GlobalPermissionCreate,
    GlobalPermissionUpdate,
    GroupCreate,
)
from floortrack.services.access import (
    global_permission_service,
    group_service,
    pending_user_service,
    role_service,
)


class TestGlobalPermissions:
    @pytest.mark.asyncio
    async def test_owner_creates_grant_with_names(self, db, factory):
        group = await factory.group("Ops")
        building = await factory.building("HQ")
        floor = await factory.floor(building, "L2")
        owner = await factory.user(Role.OWNER)

        grant = await global_permission_service.create_grant(
            db, owner, GlobalPermissionCreate(group_id=group.id, building_id=building.id, floor_id=floor.id)
        )

        assert (grant.group_name, grant.building_name, grant.floor_name) == ("Ops", "HQ", "L2")

    @pytest.mark.asyncio
    async def test_floor_outside_building_is_invalid(self, db, factory):
        group = await factory.group()
        hq = await factory.building("HQ")
        annex = await factory.building("Annex")
        annex_floor = await factory.floor(annex)
        owner = await factory.user(Role.OWNER)

        with pytest.raises(InvalidArgumentError):
            await global_permission_service.create_grant(
                db, owner, GlobalPermissionCreate(group_id=group.id, building_id=hq.id, floor_id=annex_floor.id)
            )

    @pytest.mark.asyncio
    async def test_duplicate_grant_conflicts(self, db, factory):
        group = await factory.group()
        building = await factory.building()
        floor = await factory.floor(building)
        owner = await factory.user(Role.OWNER)
        payload = GlobalPermissionCreate(group_id=group.id, building_id=building.id, floor_id=floor.id)

        await global_permission_service.create_grant(db, owner, payload)
        with pytest.raises(ConflictError):
            await global_permission_service.create_grant(db, owner, payload)

    @pytest.mark.asyncio
    async def test_org_admin_limited_to_own_groups(self, db, factory):
        mine = await factory.group("mine")
        theirs = await factory.group("theirs")
        building = await factory.building()
        floor = await factory.floor(building)
        other_floor = await factory.floor(building, "Other")
        await factory.grant(theirs, other_floor)
        org_admin = await factory.user(Role.ORG_ADMIN, (mine,))

        created = await global_permission_service.create_grant(
            db, org_admin, GlobalPermissionCreate(group_id=mine.id, building_id=building.id, floor_id=floor.id)
        )
        with pytest.raises(ForbiddenError):
            await global_permission_service.create_grant(
                db, org_admin, GlobalPermissionCreate(group_id=theirs.id, building_id=building.id, floor_id=floor.id)
            )

        listed = await global_permission_service.list_grants(db, org_admin)
        assert [g.id for g in listed] == [created.id]

    @pytest.mark.asyncio
    async def test_update_cannot_move_grant_out_of_scope(self, db, factory):
        mine = await factory.group("mine")
        theirs = await factory.group("theirs")
        building = await factory.building()
        floor = await factory.floor(building)
        grant = await factory.grant(mine, floor)
        org_admin = await factory.user(Role.ORG_ADMIN, (mine,))

        with pytest.raises(ForbiddenError):
            await global_permission_service.update_grant(
                db, org_admin, grant.id, GlobalPermissionUpdate(group_id=theirs.id)
            )

    @pytest.mark.asyncio
    async def test_site_admin_cannot_list_grants(self, db, factory):
        group = await factory.group()
        site_admin = await factory.user(Role.SITE_ADMIN, (group,))

        with pytest.raises(ForbiddenError):
            await global_permission_service.list_grants(db, site_admin)


class TestGroups:
    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, db, factory):
        owner = await factory.user(Role.OWNER)
        await group_service.create_group(db, owner, GroupCreate(name="Ops"))

        with pytest.raises(ConflictError):
            await group_service.create_group(db, owner, GroupCreate(name="Ops"))

    @pytest.mark.asyncio
    async def test_referenced_group_cannot_be_deleted(self, db, factory):
        group = await factory.group()
        owner = await factory.user(Role.OWNER)
        await factory.user(Role.VIEWER, (group,))

        with pytest.raises(ConflictError):
            await group_service.delete_group(db, owner, group.id)

    @pytest.mark.asyncio
    async def test_only_owner_manages_groups(self, db, factory):
        group = await factory.group()
        org_admin = await factory.user(Role.ORG_ADMIN, (group,))

        assert [g.name for g in await group_service.list_groups(db, org_admin)] == [group.name]
        with pytest.raises(ForbiddenError):
            await group_service.create_group(db, org_admin, GroupCreate(name="Other"))

    @pytest.mark.asyncio
    async def test_roles_listed_in_id_order(self, db, factory):
        owner = await factory.user(Role.OWNER)

        roles = await role_service.list_roles(db, owner)

        assert [r.name for r in roles] == [
            "Owner",
            "Organization Admin",
            "Site Admin",
            "Viewer",
            "Pending User",
        ]


class TestPendingUsers:
    @pytest.mark.asyncio
    async def test_lists_only_pending_users(self, db, factory):
        owner = await factory.user(Role.OWNER)
        first = await factory.user(Role.PENDING)
        second = await factory.user(Role.PENDING)
        await factory.user(Role.VIEWER)

        pending = await pending_user_service.list_pending(db, owner)

        assert {p.id for p in pending} == {first.id, second.id}

    @pytest.mark.asyncio
    async def test_missing_group_is_reported_before_any_write(self, db, factory):
        owner = await factory.user(Role.OWNER)
        pending = await factory.user(Role.PENDING)

        with pytest.raises(NotFoundError) as exc_info:
            await pending_user_service.assign(
                db, owner, pending.id, AssignPendingUserRequest(role_id=4, group_ids=[555])
            )

        assert "555" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unknown_role_is_not_found(self, db, factory):
        owner = await factory.user(Role.OWNER)
        group = await factory.group()
        pending = await factory.user(Role.PENDING)

        with pytest.raises(NotFoundError):
            await pending_user_service.assign(
                db, owner, pending.id, AssignPendingUserRequest(role_id=77, group_ids=[group.id])
            )

    @pytest.mark.asyncio
    async def test_non_owner_cannot_assign(self, db, factory):
        group = await factory.group()
        org_admin = await factory.user(Role.ORG_ADMIN, (group,))
        pending = await factory.user(Role.PENDING)

        with pytest.raises(ForbiddenError):
            await pending_user_service.assign(
                db, org_admin, pending.id, AssignPendingUserRequest(role_id=4, group_ids=[group.id])
            )
