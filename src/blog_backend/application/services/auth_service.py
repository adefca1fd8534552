"""Application authentication service for signin credential verification."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum

from blog_backend.application.ports.auth_event_repository_port import (
    AuthEventCreateInput,
    AuthEventRepositoryPort,
)
from blog_backend.application.ports.password_hasher_port import PasswordHasherPort
from blog_backend.application.ports.user_repository_port import UserRecord, UserRepositoryPort
from blog_backend.domain.auth.credential_record import MalformedCredentialRecordError
from blog_backend.domain.auth.credentials import normalize_user_email, require_user_password

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    user: UserRecord | None = None


class AuthService:
    """Authenticate credentials and append auth audit events."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        auth_events: AuthEventRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._auth_events = auth_events
        self._password_hasher = password_hasher

    async def authenticate(
        self,
        *,
        email: str,
        password: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> AuthResult:
        """Authenticate user credentials and always emit auth event.

        Unknown email, wrong password and an unreadable stored record all
        return ``INVALID_CREDENTIALS`` after one key derivation; only the audit
        event tells them apart. Blank or unencodable passwords are rejected
        before any lookup.
        """

        try:
            normalized_email = normalize_user_email(email=email)
        except ValueError:
            normalized_email = ""

        try:
            require_user_password(password=password)
        except ValueError:
            await self._append_failure(
                user=None,
                email=normalized_email,
                reason="invalid_credentials",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        user = (
            await self._users.get_by_email(email=normalized_email) if normalized_email else None
        )
        if user is None:
            # Spend one derivation so unknown emails cost as much as wrong passwords.
            await asyncio.to_thread(self._password_hasher.hash_password, password)
            await self._append_failure(
                user=None,
                email=normalized_email,
                reason="invalid_credentials",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        try:
            is_valid = await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=password,
                password_hash=user.password_hash,
            )
        except MalformedCredentialRecordError as exc:
            logger.warning(
                "signin_malformed_credential_record user_id=%s error=%s",
                user.user_id,
                exc,
            )
            await asyncio.to_thread(self._password_hasher.hash_password, password)
            await self._append_failure(
                user=user,
                email=normalized_email,
                reason="malformed_credential_record",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        if not is_valid:
            await self._append_failure(
                user=user,
                email=normalized_email,
                reason="invalid_credentials",
                ip_address=ip_address,
                user_agent=user_agent,
            )
            return AuthResult(outcome=AuthOutcome.INVALID_CREDENTIALS, user=None)

        await self._auth_events.append_event(
            AuthEventCreateInput(
                user_id=user.user_id,
                event_type="signin_success",
                ip_address=ip_address,
                user_agent=user_agent,
                payload={"email": normalized_email},
            )
        )
        logger.info("signin_success user_id=%s", user.user_id)
        return AuthResult(outcome=AuthOutcome.SUCCESS, user=user)

    async def _append_failure(
        self,
        *,
        user: UserRecord | None,
        email: str,
        reason: str,
        ip_address: str | None,
        user_agent: str | None,
    ) -> None:
        user_id = user.user_id if user is not None else None
        await self._auth_events.append_event(
            AuthEventCreateInput(
                user_id=user_id,
                event_type="signin_failed",
                ip_address=ip_address,
                user_agent=user_agent,
                payload={"email": email, "reason": reason},
            )
        )
        logger.info("signin_failed user_id=%s reason=%s", user_id, reason)
