"""
Tests for the permission evaluator and the role scope tables
"""

from unittest.mock import AsyncMock

import pytest

from floortrack.core.errors import ForbiddenError
from floortrack.core.permissions import ensure_role, permission_evaluator
from floortrack.core.roles import ADMIN_ROLES, SCOPE_TABLES, Role
from floortrack.services.identity import AppUser


def _detached_user(role: Role, group_ids=()) -> AppUser:
    return AppUser(
        id=1,
        firebase_uid="uid-detached",
        email="detached@example.com",
        first_name="D",
        last_name="U",
        role=role,
        role_id=1,
        group_ids=tuple(group_ids),
    )


class TestScopeTables:
    def test_every_table_covers_every_role(self):
        for table in SCOPE_TABLES:
            assert set(table) == set(Role)

    def test_unknown_role_name_maps_to_unrecognized(self):
        assert Role.from_name("Superuser") is Role.UNRECOGNIZED
        assert Role.from_name(None) is Role.UNRECOGNIZED
        assert Role.from_name("Site Admin") is Role.SITE_ADMIN

    def test_ensure_role(self):
        ensure_role(_detached_user(Role.SITE_ADMIN), ADMIN_ROLES)
        with pytest.raises(ForbiddenError):
            ensure_role(_detached_user(Role.VIEWER), ADMIN_ROLES)


class TestZeroQueryDecisions:
    @pytest.mark.asyncio
    async def test_owner_never_touches_the_store(self):
        db = AsyncMock()
        owner = _detached_user(Role.OWNER)

        assert await permission_evaluator.can_manage_building(db, owner, 999) is True
        assert await permission_evaluator.can_manage_floor(db, owner, 999) is True
        assert await permission_evaluator.can_read_floor(db, owner, 999) is True
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.ORG_ADMIN, Role.SITE_ADMIN])
    async def test_scoped_role_without_groups_is_denied_without_queries(self, role):
        db = AsyncMock()
        user = _detached_user(role)

        assert await permission_evaluator.can_manage_building(db, user, 1) is False
        assert await permission_evaluator.can_manage_floor(db, user, 1) is False
        assert await permission_evaluator.can_read_floor(db, user, 1) is False
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.VIEWER, Role.PENDING, Role.UNRECOGNIZED])
    async def test_non_admin_roles_cannot_manage(self, role):
        db = AsyncMock()
        user = _detached_user(role, group_ids=(1,))

        assert await permission_evaluator.can_manage_building(db, user, 1) is False
        assert await permission_evaluator.can_manage_floor(db, user, 1) is False
        db.execute.assert_not_awaited()


class TestGrantMatching:
    @pytest.mark.asyncio
    async def test_org_admin_manages_only_granted_floors(self, db, factory):
        group = await factory.group()
        building = await factory.building()
        granted = await factory.floor(building, "Granted")
        sibling = await factory.floor(building, "Sibling")
        await factory.grant(group, granted)
        org_admin = await factory.user(Role.ORG_ADMIN, (group,))

        assert await permission_evaluator.can_manage_floor(db, org_admin, granted.id) is True
        assert await permission_evaluator.can_manage_floor(db, org_admin, sibling.id) is False
        assert await permission_evaluator.can_manage_building(db, org_admin, building.id) is True

    @pytest.mark.asyncio
    async def test_site_admin_manages_every_floor_of_a_granted_building(self, db, factory):
        group = await factory.group()
        building = await factory.building()
        other_building = await factory.building("Annex")
        granted = await factory.floor(building, "Granted")
        sibling = await factory.floor(building, "Sibling")
        elsewhere = await factory.floor(other_building, "Elsewhere")
        await factory.grant(group, granted)
        site_admin = await factory.user(Role.SITE_ADMIN, (group,))

        assert await permission_evaluator.can_manage_floor(db, site_admin, granted.id) is True
        assert await permission_evaluator.can_manage_floor(db, site_admin, sibling.id) is True
        assert await permission_evaluator.can_manage_floor(db, site_admin, elsewhere.id) is False

    @pytest.mark.asyncio
    async def test_floor_reads_are_strict_for_every_scoped_role(self, db, factory):
        group = await factory.group()
        building = await factory.building()
        granted = await factory.floor(building, "Granted")
        sibling = await factory.floor(building, "Sibling")
        await factory.grant(group, granted)

        for role in (Role.ORG_ADMIN, Role.SITE_ADMIN, Role.VIEWER):
            user = await factory.user(role, (group,))
            assert await permission_evaluator.can_read_floor(db, user, granted.id) is True
            assert await permission_evaluator.can_read_floor(db, user, sibling.id) is False

    @pytest.mark.asyncio
    async def test_nonexistent_floor_is_denied_for_scoped_roles(self, db, factory):
        group = await factory.group()
        site_admin = await factory.user(Role.SITE_ADMIN, (group,))

        assert await permission_evaluator.can_manage_floor(db, site_admin, 424242) is False
        assert await permission_evaluator.can_read_floor(db, site_admin, 424242) is False

    @pytest.mark.asyncio
    async def test_grant_for_another_group_does_not_count(self, db, factory):
        mine = await factory.group()
        theirs = await factory.group()
        building = await factory.building()
        floor = await factory.floor(building)
        await factory.grant(theirs, floor)
        org_admin = await factory.user(Role.ORG_ADMIN, (mine,))

        assert await permission_evaluator.can_manage_floor(db, org_admin, floor.id) is False
        assert await permission_evaluator.can_manage_building(db, org_admin, building.id) is False
