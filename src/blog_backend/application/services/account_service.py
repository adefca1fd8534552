"""Application service for author signup and password changes."""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID, uuid4

from blog_backend.application.ports.auth_event_repository_port import (
    AuthEventCreateInput,
    AuthEventRepositoryPort,
)
from blog_backend.application.ports.password_hasher_port import PasswordHasherPort
from blog_backend.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from blog_backend.domain.auth.credential_record import MalformedCredentialRecordError
from blog_backend.domain.auth.credentials import (
    normalize_display_name,
    normalize_user_email,
    require_user_password,
)

logger = logging.getLogger(__name__)


class InvalidUserEmailError(ValueError):
    """Raised when signup email is blank after normalization."""


class InvalidUserPasswordError(ValueError):
    """Raised when a new password is blank."""


class EmailAlreadyRegisteredError(ValueError):
    """Raised when signup targets an email that already has an account."""

    def __init__(self, *, email: str) -> None:
        super().__init__(f"email already registered: {email}")
        self.email = email


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found."""

    def __init__(self, *, user_id: UUID) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class InvalidCurrentPasswordError(PermissionError):
    """Raised when a password change does not prove the current password."""

    def __init__(self) -> None:
        super().__init__("current password is invalid")


class AccountService:
    """Expose signup and password-change use-cases."""

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

    async def sign_up(
        self,
        *,
        email: str,
        password: str,
        name: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> UserRecord:
        """Create one author account with a freshly salted credential record."""

        try:
            normalized_email = normalize_user_email(email=email)
        except ValueError as exc:
            raise InvalidUserEmailError(str(exc)) from exc
        try:
            checked_password = require_user_password(password=password)
        except ValueError as exc:
            raise InvalidUserPasswordError(str(exc)) from exc

        if await self._users.get_by_email(email=normalized_email) is not None:
            raise EmailAlreadyRegisteredError(email=normalized_email)

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password,
            checked_password,
        )
        try:
            user = await self._users.create_user(
                UserCreateInput(
                    user_id=uuid4(),
                    email=normalized_email,
                    name=normalize_display_name(name=name),
                    password_hash=password_hash,
                )
            )
        except DuplicateUserEmailError as exc:
            raise EmailAlreadyRegisteredError(email=normalized_email) from exc

        await self._auth_events.append_event(
            AuthEventCreateInput(
                user_id=user.user_id,
                event_type="signup_success",
                ip_address=ip_address,
                user_agent=user_agent,
                payload={"email": normalized_email},
            )
        )
        logger.info("signup_success user_id=%s", user.user_id)
        return user

    async def get_user(self, *, user_id: UUID) -> UserRecord:
        """Return one user or raise a deterministic not-found error."""

        user = await self._users.get_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError(user_id=user_id)
        return user

    async def change_password(
        self,
        *,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> UserRecord:
        """Replace a user's credential record after verifying the current password.

        The new record always carries a new salt, even when the password is unchanged.
        """

        user = await self.get_user(user_id=user_id)
        try:
            checked_password = require_user_password(password=new_password)
        except ValueError as exc:
            raise InvalidUserPasswordError(str(exc)) from exc

        try:
            require_user_password(password=current_password)
        except ValueError as exc:
            raise InvalidCurrentPasswordError() from exc

        try:
            is_valid = await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=current_password,
                password_hash=user.password_hash,
            )
        except MalformedCredentialRecordError as exc:
            logger.warning(
                "password_change_malformed_credential_record user_id=%s error=%s",
                user_id,
                exc,
            )
            raise InvalidCurrentPasswordError() from exc
        if not is_valid:
            raise InvalidCurrentPasswordError()

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password,
            checked_password,
        )
        updated = await self._users.replace_password_hash(
            user_id=user_id,
            password_hash=password_hash,
        )
        if updated is None:
            raise UserNotFoundError(user_id=user_id)

        await self._auth_events.append_event(
            AuthEventCreateInput(user_id=user_id, event_type="password_changed")
        )
        logger.info("password_changed user_id=%s", user_id)
        return updated
