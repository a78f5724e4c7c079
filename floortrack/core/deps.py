"""
FastAPI Dependencies
Session-cookie authentication and the resolved application user
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from floortrack.core.config import settings
from floortrack.core.database import get_db
from floortrack.core.errors import UnauthenticatedError
from floortrack.core.logging import bind_session_uid
from floortrack.services.identity import AppUser, identity_resolver
from floortrack.services.identity_provider import IdentityProvider, IdentityRecord, get_identity_provider

logger = structlog.get_logger()


async def get_session_identity(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> IdentityRecord:
    """Verify the session cookie with the identity provider"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        logger.warning("Missing session cookie", path=request.url.path)
        raise UnauthenticatedError("Not authenticated")

    identity = await provider.verify_token(token)
    bind_session_uid(request, identity.uid)
    return identity


async def get_current_user(
    identity: IdentityRecord = Depends(get_session_identity),
    db: AsyncSession = Depends(get_db),
) -> AppUser:
    """
    The application user behind a valid session.

    A verified identity with no User row is unauthenticated for app
    purposes.
    """
    user = await identity_resolver.resolve(db, identity.uid)
    if user is None:
        logger.warning("Verified identity has no application user", uid=identity.uid)
        raise UnauthenticatedError("Unauthorized")
    return user
