"""
Initial schema for FloorTrack

Revision ID: 000001_initial
Revises:
Create Date: 2026-10-18 09:00:00
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '000001_initial'
down_revision = None
branch_labels = None
depends_on = None

BigIntId = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    roles = op.create_table(
        'roles',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=50), nullable=False, unique=True),
    )

    op.create_table(
        'groups',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False, unique=True),
    )

    op.create_table(
        'users',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column('firebase_uid', sa.String(length=128), nullable=False, unique=True),
        sa.Column('email', sa.String(length=254), nullable=False, unique=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role_id', BigIntId, sa.ForeignKey('roles.id'), nullable=False),
    )
    op.create_index('ix_users_role_id', 'users', ['role_id'])
    op.create_index('ix_users_updated_at', 'users', ['updated_at'])
    op.create_index('ix_user_role_created', 'users', ['role_id', 'created_at'])

    op.create_table(
        'user_groups',
        sa.Column('user_id', BigIntId, sa.ForeignKey('users.id'), primary_key=True),
        sa.Column('group_id', BigIntId, sa.ForeignKey('groups.id'), primary_key=True),
    )
    op.create_index('ix_user_groups_group_id', 'user_groups', ['group_id'])

    op.create_table(
        'buildings',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
    )

    op.create_table(
        'floors',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('building_id', BigIntId, sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('svg_map', sa.Text(), nullable=False),
    )
    op.create_index('ix_floors_building_id', 'floors', ['building_id'])

    op.create_table(
        'access_points',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('cx', sa.Float(), nullable=False),
        sa.Column('cy', sa.Float(), nullable=False),
        sa.Column('floor_id', BigIntId, sa.ForeignKey('floors.id'), nullable=False),
    )
    op.create_index('ix_access_points_floor_id', 'access_points', ['floor_id'])

    op.create_table(
        'client_devices',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        *_timestamps(),
        sa.Column('mac', sa.String(length=32), nullable=False, unique=True),
        sa.Column('ap_id', BigIntId, sa.ForeignKey('access_points.id'), nullable=False),
    )
    op.create_index('ix_client_devices_ap_id', 'client_devices', ['ap_id'])
    op.create_index('ix_client_devices_updated_at', 'client_devices', ['updated_at'])

    op.create_table(
        'user_devices',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('mac', sa.String(length=32), nullable=False, unique=True),
        sa.Column('user_id', BigIntId, sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_user_devices_user_id', 'user_devices', ['user_id'])

    op.create_table(
        'global_permissions',
        sa.Column('id', BigIntId, primary_key=True, autoincrement=True),
        sa.Column('group_id', BigIntId, sa.ForeignKey('groups.id'), nullable=False),
        sa.Column('building_id', BigIntId, sa.ForeignKey('buildings.id'), nullable=False),
        sa.Column('floor_id', BigIntId, sa.ForeignKey('floors.id'), nullable=False),
        sa.UniqueConstraint('group_id', 'building_id', 'floor_id', name='uq_global_permission_grant'),
    )
    op.create_index('ix_global_permissions_group_id', 'global_permissions', ['group_id'])
    op.create_index('ix_global_permissions_building_id', 'global_permissions', ['building_id'])
    op.create_index('ix_global_permissions_floor_id', 'global_permissions', ['floor_id'])

    op.bulk_insert(
        roles,
        [
            {'id': 1, 'name': 'Owner'},
            {'id': 2, 'name': 'Organization Admin'},
            {'id': 3, 'name': 'Site Admin'},
            {'id': 4, 'name': 'Viewer'},
            {'id': 5, 'name': 'Pending User'},
        ],
    )


def downgrade() -> None:
    op.drop_table('global_permissions')
    op.drop_table('user_devices')
    op.drop_table('client_devices')
    op.drop_table('access_points')
    op.drop_table('floors')
    op.drop_table('buildings')
    op.drop_table('user_groups')
    op.drop_table('users')
    op.drop_table('groups')
    op.drop_table('roles')
