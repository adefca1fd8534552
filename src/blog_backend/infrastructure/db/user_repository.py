"""SQLAlchemy adapter for user persistence."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog_backend.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from blog_backend.infrastructure.db.metadata import users


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id or None."""

        statement = sa.select(*users.c).where(users.c.id == user_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email or None."""

        statement = sa.select(*users.c).where(users.c.email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row, translating unique-email violations."""

        statement = sa.insert(users).values(
            id=payload.user_id,
            email=payload.email,
            name=payload.name,
            password_hash=payload.password_hash,
        ).returning(*users.c)

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateUserEmailError(payload.email) from exc

        return _to_user_record(row)

    async def replace_password_hash(
        self,
        *,
        user_id: UUID,
        password_hash: str,
    ) -> UserRecord | None:
        """Overwrite the stored credential record for one user."""

        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(password_hash=password_hash, updated_at=sa.func.current_timestamp())
            .returning(*users.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return None
        return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    raw_user_id = row["id"]
    user_id = raw_user_id if isinstance(raw_user_id, UUID) else UUID(str(raw_user_id))
    return UserRecord(
        user_id=user_id,
        email=cast(str, row["email"]),
        name=cast(str | None, row["name"]),
        password_hash=cast(str, row["password_hash"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
