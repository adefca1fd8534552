"""Signed session token issuance and verification using PyJWT."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

_ALGORITHM = "HS256"
_DEFAULT_TTL = timedelta(hours=1)


class InvalidAuthTokenError(PermissionError):
    """Raised when a bearer token is malformed, expired, or badly signed."""


@dataclass(frozen=True)
class IssuedToken:
    """Signed token plus its absolute expiry."""

    token: str
    expires_at: datetime


class JwtTokenService:
    """Issue and verify HS256 tokens whose ``sub`` claim is the user id."""

    def __init__(
        self,
        *,
        secret: str,
        token_ttl: timedelta = _DEFAULT_TTL,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("token secret cannot be blank")
        self._secret = secret
        self._token_ttl = token_ttl
        self._now = now or (lambda: datetime.now(tz=UTC))

    def issue_token(self, *, user_id: UUID) -> IssuedToken:
        """Sign a token for one user id."""

        issued_at = self._now().replace(microsecond=0)
        expires_at = issued_at + self._token_ttl
        payload = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def decode_subject(self, token: str) -> UUID:
        """Verify signature and expiry, then return the ``sub`` claim as a UUID."""

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                # Expiry is checked against the injected clock below.
                options={"require": ["sub", "exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidAuthTokenError("invalid or expired auth token") from exc

        expires_at = datetime.fromtimestamp(int(claims["exp"]), tz=UTC)
        if expires_at <= self._now():
            raise InvalidAuthTokenError("invalid or expired auth token")

        try:
            return UUID(str(claims["sub"]))
        except ValueError as exc:
            raise InvalidAuthTokenError("invalid or expired auth token") from exc
