"""
Application error kinds and their HTTP mapping.

Services raise these; the handlers registered in ``floortrack.main`` turn
them into ``{"error": message}`` responses. Messages are short and safe
to show to clients.
"""

from __future__ import annotations

from fastapi import status
from sqlalchemy.exc import IntegrityError


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthenticated"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidArgumentError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid argument"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(AppError):
    pass


class IdentityProviderError(InternalError):
    """Unexpected failure talking to the external identity provider."""

    default_message = "Identity provider error"


_UNIQUE_MARKERS = ("unique constraint", "unique violation", "duplicate key")
_FOREIGN_KEY_MARKERS = ("foreign key",)


def classify_integrity_error(exc: IntegrityError, conflict_message: str | None = None) -> AppError:
    """
    Map a store constraint violation to an application error kind.

    asyncpg exposes a SQLSTATE on the original exception; SQLite only
    has the message text, so both are checked.
    """
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig if orig is not None else exc).lower()

    if sqlstate == "23505" or any(marker in text for marker in _UNIQUE_MARKERS):
        return ConflictError(conflict_message or "Resource already exists")
    if sqlstate == "23503" or any(marker in text for marker in _FOREIGN_KEY_MARKERS):
        return InvalidArgumentError("Referenced resource does not exist")
    return InternalError()
