"""Bearer header parsing and caller resolution for authenticated routes."""

from __future__ import annotations

from fastapi import HTTPException

from blog_backend.application.ports.user_repository_port import UserRecord, UserRepositoryPort
from blog_backend.infrastructure.security.token_service import (
    InvalidAuthTokenError,
    JwtTokenService,
)

__all__ = [
    "AuthGuard",
    "InvalidAuthTokenError",
    "MissingAuthTokenError",
    "extract_bearer_token",
    "require_authenticated_user",
]


class MissingAuthTokenError(PermissionError):
    """Raised when a bearer token is required but not provided."""


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract token from standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError("missing bearer token")

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise InvalidAuthTokenError("invalid bearer token header")

    return parts[1]


class AuthGuard:
    """Resolve the authenticated caller from a signed bearer token."""

    def __init__(
        self,
        *,
        token_service: JwtTokenService,
        user_repository: UserRepositoryPort,
    ) -> None:
        self._token_service = token_service
        self._user_repository = user_repository

    async def require_user(self, *, authorization_header: str | None) -> UserRecord:
        """Return the persisted user named by the token subject."""

        token = extract_bearer_token(authorization_header)
        user_id = self._token_service.decode_subject(token)

        user = await self._user_repository.get_by_id(user_id=user_id)
        if user is None:
            raise InvalidAuthTokenError("invalid or expired auth token")
        return user


async def require_authenticated_user(
    *,
    auth_guard: AuthGuard,
    authorization_header: str | None,
) -> UserRecord:
    """Resolve the caller or raise HTTP 401 for missing and invalid tokens."""

    try:
        return await auth_guard.require_user(authorization_header=authorization_header)
    except MissingAuthTokenError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except InvalidAuthTokenError as exc:
        raise HTTPException(
            status_code=401,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
