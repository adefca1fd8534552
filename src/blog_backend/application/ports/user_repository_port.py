"""Port for user persistence operations used by account and auth services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class DuplicateUserEmailError(ValueError):
    """Raised by repositories when the unique email constraint is violated."""


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    name: str | None
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Input payload for inserting one user row."""

    user_id: UUID
    email: str
    name: str | None
    password_hash: str


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user and return the persisted row."""

    async def replace_password_hash(
        self,
        *,
        user_id: UUID,
        password_hash: str,
    ) -> UserRecord | None:
        """Store a new credential record for one user and return the updated row."""
