"""SQLAlchemy adapter for auth event append operations."""

from __future__ import annotations

import logging
from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog_backend.application.ports.auth_event_repository_port import (
    AuthEventCreateInput,
    AuthEventRepositoryPort,
)
from blog_backend.infrastructure.db.metadata import auth_events

logger = logging.getLogger(__name__)

_SECRET_PAYLOAD_KEYS = frozenset({"password", "password_hash", "token", "current_password"})


class SqlAlchemyAuthEventRepository(AuthEventRepositoryPort):
    """Auth event repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append_event(self, payload: AuthEventCreateInput) -> int:
        """Insert an auth audit event row and return its numeric id."""

        statement = sa.insert(auth_events).values(
            user_id=payload.user_id,
            event_type=payload.event_type,
            ip_address=payload.ip_address,
            user_agent=payload.user_agent,
            payload=_without_secrets(payload.payload, event_type=payload.event_type),
        ).returning(auth_events.c.id)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            inserted_id = result.scalar_one()
            await session.commit()

        return int(inserted_id)


def _without_secrets(payload: dict[str, Any], *, event_type: str) -> dict[str, Any]:
    dropped = _SECRET_PAYLOAD_KEYS.intersection(payload)
    if dropped:
        logger.warning(
            "auth_event_secret_keys_dropped event_type=%s keys=%s",
            event_type,
            ",".join(sorted(dropped)),
        )
    return {key: value for key, value in payload.items() if key not in _SECRET_PAYLOAD_KEYS}
