"""
Identity Provider Client
Firebase Authentication over its REST API (Identity Toolkit v1)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import structlog

from floortrack.core.config import settings
from floortrack.core.errors import (
    AppError,
    ConflictError,
    ForbiddenError,
    IdentityProviderError,
    InvalidArgumentError,
    UnauthenticatedError,
)
from floortrack.core.token_validator import FirebaseIdTokenStrategy, TokenValidationStrategy

logger = structlog.get_logger()


@dataclass(frozen=True)
class IdentityRecord:
    uid: str
    email: str
    id_token: Optional[str] = None


class IdentityProvider(ABC):
    """External identity operations the application depends on"""

    @abstractmethod
    async def verify_token(self, raw_token: str) -> IdentityRecord:
        raise NotImplementedError

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> IdentityRecord:
        raise NotImplementedError

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> IdentityRecord:
        raise NotImplementedError

    @abstractmethod
    async def send_email_verification(self, id_token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def send_password_reset(self, email: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_identity(self, uid: str, id_token: Optional[str] = None) -> None:
        """Delete an identity; an identity that is already gone is not an error"""
        raise NotImplementedError


def _error_code(response: httpx.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return "UNKNOWN"
    # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
    return str(message).split(":")[0].strip()


_CODE_ERRORS: dict[str, tuple[type[AppError], str]] = {
    "EMAIL_EXISTS": (ConflictError, "Email already registered"),
    "EMAIL_NOT_FOUND": (UnauthenticatedError, "Invalid email or password"),
    "INVALID_PASSWORD": (UnauthenticatedError, "Invalid email or password"),
    "INVALID_LOGIN_CREDENTIALS": (UnauthenticatedError, "Invalid email or password"),
    "USER_DISABLED": (ForbiddenError, "Account disabled"),
    "INVALID_EMAIL": (InvalidArgumentError, "Invalid email"),
    "MISSING_EMAIL": (InvalidArgumentError, "Email is required"),
    "MISSING_PASSWORD": (InvalidArgumentError, "Password is required"),
    "WEAK_PASSWORD": (InvalidArgumentError, "Password is too weak"),
}


def map_provider_error(code: str) -> AppError:
    if code not in _CODE_ERRORS:
        return IdentityProviderError()
    error_class, message = _CODE_ERRORS[code]
    return error_class(message)


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(
        self,
        *,
        api_key: str,
        project_id: str,
        base_url: str,
        token_strategy: TokenValidationStrategy,
        admin_access_token: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._project_id = project_id
        self._base_url = base_url.rstrip("/")
        self._token_strategy = token_strategy
        self._admin_access_token = admin_access_token
        self._timeout = timeout
        self._transport = transport

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        bearer: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Authorization": f"Bearer {bearer}"} if bearer else None
        params = None if bearer else {"key": self._api_key}
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                return await client.post(path, json=payload, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Identity provider request failed", path=path, error=str(exc))
            raise IdentityProviderError() from exc

    async def _call(self, path: str, payload: dict[str, Any], **kwargs) -> dict[str, Any]:
        response = await self._post(path, payload, **kwargs)
        if response.is_success:
            return response.json()

        code = _error_code(response)
        logger.warning("Identity provider rejected request", path=path, code=code, status=response.status_code)
        raise map_provider_error(code)

    async def verify_token(self, raw_token: str) -> IdentityRecord:
        result = await self._token_strategy.validate(raw_token)
        return IdentityRecord(uid=result.subject, email=str(result.claims.get("email", "")), id_token=raw_token)

    async def sign_up(self, email: str, password: str) -> IdentityRecord:
        data = await self._call(
            "/accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        logger.info("Identity created", uid=data.get("localId"))
        return IdentityRecord(uid=data["localId"], email=data.get("email", email), id_token=data.get("idToken"))

    async def sign_in(self, email: str, password: str) -> IdentityRecord:
        data = await self._call(
            "/accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return IdentityRecord(uid=data["localId"], email=data.get("email", email), id_token=data["idToken"])

    async def send_email_verification(self, id_token: str) -> None:
        await self._call("/accounts:sendOobCode", {"requestType": "VERIFY_EMAIL", "idToken": id_token})

    async def send_password_reset(self, email: str) -> None:
        await self._call("/accounts:sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    async def delete_identity(self, uid: str, id_token: Optional[str] = None) -> None:
        if self._admin_access_token:
            response = await self._post(
                f"/projects/{self._project_id}/accounts:delete",
                {"localId": uid},
                bearer=self._admin_access_token,
            )
        elif id_token:
            response = await self._post("/accounts:delete", {"idToken": id_token})
        else:
            logger.error("No credential available to delete identity", uid=uid)
            raise IdentityProviderError()

        if response.is_success:
            logger.warning("Identity deleted", uid=uid)
            return

        code = _error_code(response)
        if code in ("USER_NOT_FOUND", "EMAIL_NOT_FOUND"):
            logger.info("Identity already deleted", uid=uid)
            return
        logger.error("Identity deletion rejected", uid=uid, code=code, status=response.status_code)
        raise map_provider_error(code)


identity_provider: IdentityProvider = FirebaseIdentityProvider(
    api_key=settings.FIREBASE_API_KEY,
    project_id=settings.FIREBASE_PROJECT_ID,
    base_url=settings.FIREBASE_AUTH_BASE_URL,
    admin_access_token=settings.FIREBASE_ADMIN_ACCESS_TOKEN,
    timeout=settings.IDENTITY_HTTP_TIMEOUT_SECONDS,
    token_strategy=FirebaseIdTokenStrategy(
        project_id=settings.FIREBASE_PROJECT_ID,
        jwks_url=settings.FIREBASE_JWKS_URL,
        timeout=settings.IDENTITY_HTTP_TIMEOUT_SECONDS,
    ),
)


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency; overridden in tests"""
    return identity_provider
