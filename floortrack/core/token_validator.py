"""
Session token validation.

The active strategy verifies Firebase ID tokens: RS256 signatures checked
against Google's published securetoken keys, plus the issuer, audience
and subject claims for the configured project.
"""

from __future__ import annotations

import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
import structlog
from joserfc import jwt as jose_jwt
from joserfc.errors import JoseError
from joserfc.jwk import KeySet

from floortrack.core.errors import IdentityProviderError, UnauthenticatedError

logger = structlog.get_logger()

_MAX_AGE = re.compile(r"max-age=(\d+)")
DEFAULT_JWKS_TTL_SECONDS = 3600


@dataclass(frozen=True)
class TokenValidationResult:
    subject: str
    claims: dict
    issuer: str


class TokenValidationStrategy(ABC):
    @abstractmethod
    async def validate(self, token: str) -> TokenValidationResult:
        raise NotImplementedError


class FirebaseIdTokenStrategy(TokenValidationStrategy):
    def __init__(
        self,
        *,
        project_id: str,
        jwks_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._project_id = project_id
        self._issuer = f"https://securetoken.google.com/{project_id}"
        self._jwks_url = jwks_url
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._key_set: Optional[KeySet] = None
        self._keys_expire_at = 0.0

    async def _signing_keys(self) -> KeySet:
        if self._key_set is not None and self._clock() < self._keys_expire_at:
            return self._key_set

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._jwks_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch token signing keys", url=self._jwks_url, error=str(exc))
            raise IdentityProviderError() from exc

        match = _MAX_AGE.search(response.headers.get("cache-control", ""))
        ttl = int(match.group(1)) if match else DEFAULT_JWKS_TTL_SECONDS

        self._key_set = KeySet.import_key_set(response.json())
        self._keys_expire_at = self._clock() + ttl
        logger.debug("Token signing keys refreshed", keys=len(self._key_set.keys), ttl=ttl)
        return self._key_set

    async def validate(self, token: str) -> TokenValidationResult:
        if not self._project_id:
            logger.error("FIREBASE_PROJECT_ID is not configured")
            raise UnauthenticatedError("Invalid session")

        key_set = await self._signing_keys()
        try:
            token_obj = jose_jwt.decode(token, key_set, algorithms=["RS256"])
            claims_registry = jose_jwt.JWTClaimsRegistry(
                now=int(self._clock()),
                iss={"essential": True, "value": self._issuer},
                aud={"essential": True, "value": self._project_id},
                sub={"essential": True},
                exp={"essential": True},
                iat={"essential": True},
            )
            claims_registry.validate(token_obj.claims)
        except (JoseError, ValueError) as exc:
            logger.warning("ID token verification failed", error=str(exc))
            raise UnauthenticatedError("Invalid session") from exc

        claims = dict(token_obj.claims)
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.strip():
            logger.warning("ID token has an empty subject")
            raise UnauthenticatedError("Invalid session")
        if int(claims["iat"]) > int(self._clock()):
            logger.warning("ID token issued in the future", subject=subject)
            raise UnauthenticatedError("Invalid session")

        logger.debug("ID token verified", subject=subject)
        return TokenValidationResult(subject=subject, claims=claims, issuer=self._issuer)
