"""SQLAlchemy adapter for blog post persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog_backend.application.ports.post_repository_port import (
    PostCreateInput,
    PostPage,
    PostRecord,
    PostRepositoryPort,
    PostUpdateInput,
)
from blog_backend.infrastructure.db.metadata import posts


class SqlAlchemyPostRepository(PostRepositoryPort):
    """Post repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_post(self, payload: PostCreateInput) -> PostRecord:
        """Insert one post row stamped with a microsecond-precision creation time."""

        now = datetime.now(tz=UTC)
        statement = sa.insert(posts).values(
            id=payload.post_id,
            author_id=payload.author_id,
            title=payload.title,
            content=payload.content,
            published=payload.published,
            created_at=now,
            updated_at=now,
        ).returning(*posts.c)

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().one()
            await session.commit()

        return _to_post_record(row)

    async def get_by_id(self, *, post_id: UUID) -> PostRecord | None:
        """Return post by id or None."""

        statement = sa.select(*posts.c).where(posts.c.id == post_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_post_record(row)

    async def list_posts(self, *, limit: int, offset: int) -> PostPage:
        """Return one newest-first page plus the total row count."""

        page_statement = (
            sa.select(*posts.c)
            .order_by(posts.c.created_at.desc(), posts.c.id.desc())
            .limit(limit)
            .offset(offset)
        )
        count_statement = sa.select(sa.func.count()).select_from(posts)

        async with self._session_factory() as session:
            page_result = await session.execute(page_statement)
            count_result = await session.execute(count_statement)

        return PostPage(
            items=[_to_post_record(row) for row in page_result.mappings().all()],
            total=int(count_result.scalar_one()),
        )

    async def update_post(self, *, post_id: UUID, changes: PostUpdateInput) -> PostRecord | None:
        """Apply non-None fields and bump ``updated_at``."""

        values: dict[str, Any] = {"updated_at": datetime.now(tz=UTC)}
        if changes.title is not None:
            values["title"] = changes.title
        if changes.content is not None:
            values["content"] = changes.content
        if changes.published is not None:
            values["published"] = changes.published

        statement = (
            sa.update(posts).where(posts.c.id == post_id).values(**values).returning(*posts.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return None
        return _to_post_record(row)

    async def delete_post(self, *, post_id: UUID) -> bool:
        """Delete one post row."""

        statement = sa.delete(posts).where(posts.c.id == post_id)

        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        return int(result.rowcount or 0) > 0


def _to_post_record(row: sa.RowMapping) -> PostRecord:
    raw_post_id = row["id"]
    raw_author_id = row["author_id"]
    return PostRecord(
        post_id=raw_post_id if isinstance(raw_post_id, UUID) else UUID(str(raw_post_id)),
        author_id=raw_author_id if isinstance(raw_author_id, UUID) else UUID(str(raw_author_id)),
        title=cast(str, row["title"]),
        content=cast(str, row["content"]),
        published=bool(row["published"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
