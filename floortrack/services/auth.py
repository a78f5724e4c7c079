"""
Auth Service
Registration, sign-in and password reset through the identity provider
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from floortrack.core.database import atomic
from floortrack.core.errors import AppError
from floortrack.core.roles import PENDING_ROLE_ID
from floortrack.repositories.user import user_repository
from floortrack.schemas.auth import LoginRequest, RegisterRequest, ResetPasswordRequest
from floortrack.services.identity_provider import IdentityProvider, IdentityRecord

logger = structlog.get_logger()


class AuthService:
    async def register(self, db: AsyncSession, provider: IdentityProvider, data: RegisterRequest) -> None:
        """
        Create the external identity, then a Pending User row bound to it.

        If the row cannot be written the new identity is removed again so
        the email can be reused.
        """
        email = data.email.lower()
        identity = await provider.sign_up(email, data.password)

        try:
            async with atomic(db, "Email already registered"):
                await user_repository.create(
                    db,
                    obj_in={
                        "firebase_uid": identity.uid,
                        "email": email,
                        "first_name": data.first_name,
                        "last_name": data.last_name,
                        "role_id": PENDING_ROLE_ID,
                    },
                    commit=False,
                )
        except AppError:
            logger.warning("User row insert failed; removing new identity", uid=identity.uid)
            try:
                await provider.delete_identity(identity.uid, id_token=identity.id_token)
            except AppError as cleanup_error:
                logger.error("Identity cleanup failed; identity is orphaned", uid=identity.uid, error=cleanup_error.message)
            raise

        if identity.id_token:
            try:
                await provider.send_email_verification(identity.id_token)
            except AppError as exc:
                logger.error("Verification email request failed", uid=identity.uid, error=exc.message)

        logger.info("User registered", uid=identity.uid)

    async def login(self, provider: IdentityProvider, data: LoginRequest) -> IdentityRecord:
        identity = await provider.sign_in(data.email.lower(), data.password)
        logger.info("User signed in", uid=identity.uid)
        return identity

    async def reset_password(self, provider: IdentityProvider, data: ResetPasswordRequest) -> None:
        await provider.send_password_reset(data.email.lower())
        logger.info("Password reset requested")


auth_service = AuthService()
