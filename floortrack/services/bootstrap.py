"""
Startup bootstrap: role reference rows and the optional bootstrap Owner
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.config import settings
from floortrack.core.roles import ROLE_REFERENCE_ROWS, Role
from floortrack.repositories.role import role_repository
from floortrack.repositories.user import user_repository

logger = structlog.get_logger()


async def ensure_reference_roles(db: AsyncSession) -> None:
    """Insert any missing fixed role rows; existing rows are left alone"""
    created = 0
    for role_id, role in ROLE_REFERENCE_ROWS:
        if await role_repository.get(db, role_id) is None:
            await role_repository.create(db, obj_in={"id": role_id, "name": role.value}, commit=False)
            created += 1
    await db.commit()
    logger.info("Reference roles ensured", created=created)


async def promote_bootstrap_owner(db: AsyncSession) -> None:
    email = settings.BOOTSTRAP_OWNER_EMAIL.lower().strip()
    if not email:
        return

    user = await user_repository.get_by_email(db, email)
    if user is None:
        logger.info("Bootstrap owner not registered yet", email=email)
        return

    owner = await role_repository.get_by_name(db, Role.OWNER.value)
    if owner is None:
        logger.error("Owner role row missing; cannot promote bootstrap owner")
        return
    if user.role_id == owner.id:
        logger.info("Bootstrap owner already promoted", user_id=user.id)
        return

    await user_repository.update(db, db_obj=user, obj_in={"role_id": owner.id})
    logger.warning("Bootstrap owner promoted", user_id=user.id)
