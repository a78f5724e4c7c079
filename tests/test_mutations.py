"""
Tests for multi-row writes: floor seeding, pending-user assignment and account deletion
"""

import pytest
from sqlalchemy import func, select

from floortrack.core.errors import InvalidArgumentError
from floortrack.core.roles import PENDING_ROLE_ID, Role
from floortrack.models import GlobalPermission, User, UserGroup, UserOwnedDevice
from floortrack.repositories.user import user_repository
from floortrack.services.mutations import mutation_coordinator


async def _count(db, model, *conditions) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*conditions))).scalar()


async def _memberships(db, user_id: int) -> list[int]:
    result = await db.execute(
        select(UserGroup.group_id).where(UserGroup.user_id == user_id).order_by(UserGroup.group_id)
    )
    return list(result.scalars().all())


class TestCreateFloor:
    @pytest.mark.asyncio
    async def test_seeds_grant_for_lowest_group(self, db, factory):
        low = await factory.group("low")
        high = await factory.group("high")
        building = await factory.building()
        org_admin = await factory.user(Role.ORG_ADMIN, (high, low))

        floor = await mutation_coordinator.create_floor(
            db, org_admin, name="L1", svg_map="<svg/>", building_id=building.id
        )

        grants = (await db.execute(select(GlobalPermission).where(GlobalPermission.floor_id == floor.id))).scalars().all()
        assert [(g.group_id, g.building_id) for g in grants] == [(low.id, building.id)]

    @pytest.mark.asyncio
    async def test_creator_without_groups_gets_no_grant(self, db, factory):
        building = await factory.building()
        owner = await factory.user(Role.OWNER)

        floor = await mutation_coordinator.create_floor(
            db, owner, name="L1", svg_map="<svg/>", building_id=building.id
        )

        assert floor.id is not None
        assert await _count(db, GlobalPermission) == 0

    @pytest.mark.asyncio
    async def test_missing_building_leaves_nothing_behind(self, db, factory):
        group = await factory.group()
        org_admin = await factory.user(Role.ORG_ADMIN, (group,))

        with pytest.raises(InvalidArgumentError):
            await mutation_coordinator.create_floor(
                db, org_admin, name="L1", svg_map="<svg/>", building_id=31337
            )

        assert await _count(db, GlobalPermission) == 0


class TestAssignPendingUser:
    @pytest.mark.asyncio
    async def test_replaces_role_and_memberships(self, db, factory):
        old = await factory.group("old")
        new_a = await factory.group("new-a")
        new_b = await factory.group("new-b")
        pending = await factory.user(Role.PENDING, (old,))
        target = await user_repository.get(db, pending.id)

        await mutation_coordinator.assign_pending_user(
            db, target, role_id=3, group_ids=[new_b.id, new_a.id]
        )

        role_id = (await db.execute(select(User.role_id).where(User.id == pending.id))).scalar()
        assert role_id == 3
        assert await _memberships(db, pending.id) == sorted([new_a.id, new_b.id])

    @pytest.mark.asyncio
    async def test_failed_membership_insert_rolls_back_role_change(self, db, factory):
        old = await factory.group("old")
        good = await factory.group("good")
        pending = await factory.user(Role.PENDING, (old,))
        # The rollback expires loaded instances; keep plain ids for the asserts
        old_id, good_id = old.id, good.id
        target = await user_repository.get(db, pending.id)

        with pytest.raises(InvalidArgumentError):
            await mutation_coordinator.assign_pending_user(
                db, target, role_id=2, group_ids=[good_id, 987654]
            )

        role_id = (await db.execute(select(User.role_id).where(User.id == pending.id))).scalar()
        assert role_id == PENDING_ROLE_ID
        assert await _memberships(db, pending.id) == [old_id]


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_removes_rows_then_identity(self, db, factory, provider):
        group = await factory.group()
        viewer = await factory.user(Role.VIEWER, (group,))
        await factory.owned_device(viewer, "aa:bb:cc:dd:ee:01")
        await factory.owned_device(viewer, "aa:bb:cc:dd:ee:02", name="Phone")

        await mutation_coordinator.delete_account(db, provider, viewer.firebase_uid)

        assert await _count(db, User, User.id == viewer.id) == 0
        assert await _count(db, UserGroup, UserGroup.user_id == viewer.id) == 0
        assert await _count(db, UserOwnedDevice, UserOwnedDevice.user_id == viewer.id) == 0
        assert provider.deleted == [viewer.firebase_uid]

    @pytest.mark.asyncio
    async def test_provider_failure_does_not_restore_rows(self, db, factory, provider):
        viewer = await factory.user(Role.VIEWER)
        provider.fail_delete = True

        await mutation_coordinator.delete_account(db, provider, viewer.firebase_uid)

        assert await _count(db, User, User.id == viewer.id) == 0
        assert provider.deleted == []

    @pytest.mark.asyncio
    async def test_identity_without_user_row_is_still_deleted(self, db, provider):
        await mutation_coordinator.delete_account(db, provider, "uid-orphan")

        assert provider.deleted == ["uid-orphan"]

    @pytest.mark.asyncio
    async def test_other_users_are_untouched(self, db, factory, provider):
        group = await factory.group()
        leaving = await factory.user(Role.VIEWER, (group,))
        staying = await factory.user(Role.VIEWER, (group,))

        await mutation_coordinator.delete_account(db, provider, leaving.firebase_uid)

        assert await _memberships(db, staying.id) == [group.id]
