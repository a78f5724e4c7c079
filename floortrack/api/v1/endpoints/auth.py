"""
Authentication Endpoints
Registration, session cookie login/logout, password reset and the current user
"""

from typing import Any

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from floortrack.core.config import settings
from floortrack.core.database import get_db
from floortrack.core.deps import get_current_user
from floortrack.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    ResetPasswordRequest,
    SessionUser,
)
from floortrack.schemas.base import MessageResponse
from floortrack.services.auth import auth_service
from floortrack.services.identity import AppUser
from floortrack.services.identity_provider import IdentityProvider, get_identity_provider

logger = structlog.get_logger()
router = APIRouter()


def _cookie_attributes() -> dict[str, Any]:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "lax",
        "path": "/",
    }


def set_session_cookie(response: Response, id_token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        id_token,
        max_age=settings.SESSION_COOKIE_MAX_AGE_SECONDS,
        **_cookie_attributes(),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.SESSION_COOKIE_NAME, **_cookie_attributes())


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Any:
    """
    Register a new account

    The account starts in the Pending User role until an Owner assigns
    a role and groups.
    """
    await auth_service.register(db, provider, data)
    return MessageResponse(message="Verification email sent! User created successfully!")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Any:
    identity = await auth_service.login(provider, data)
    set_session_cookie(response, identity.id_token)
    return LoginResponse(
        message="User logged in successfully",
        user=SessionUser(uid=identity.uid, email=identity.email),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> Any:
    clear_session_cookie(response)
    return MessageResponse(message="User logged out successfully")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    data: ResetPasswordRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Any:
    await auth_service.reset_password(provider, data)
    return MessageResponse(message="Password reset email sent successfully!")


@router.get("/me", response_model=MeResponse)
async def me(current_user: AppUser = Depends(get_current_user)) -> Any:
    """The application user bound to the session cookie"""
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        role=current_user.role.value,
        role_id=current_user.role_id,
        group_ids=list(current_user.group_ids),
    )
