"""Port for blog post persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class PostRecord:
    """Blog post persistence model."""

    post_id: UUID
    author_id: UUID
    title: str
    content: str
    published: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PostCreateInput:
    """Input payload for inserting one post row."""

    post_id: UUID
    author_id: UUID
    title: str
    content: str
    published: bool


@dataclass(frozen=True)
class PostUpdateInput:
    """Partial update payload; None fields keep their stored value."""

    title: str | None = None
    content: str | None = None
    published: bool | None = None


@dataclass(frozen=True)
class PostPage:
    """One page of posts plus the total row count."""

    items: list[PostRecord]
    total: int


class PostRepositoryPort(Protocol):
    """Blog post repository contract."""

    async def create_post(self, payload: PostCreateInput) -> PostRecord:
        """Insert one post and return the persisted row."""

    async def get_by_id(self, *, post_id: UUID) -> PostRecord | None:
        """Return post by id or None."""

    async def list_posts(self, *, limit: int, offset: int) -> PostPage:
        """Return posts ordered newest first together with the total count."""

    async def update_post(self, *, post_id: UUID, changes: PostUpdateInput) -> PostRecord | None:
        """Apply a partial update and return the updated row, or None if missing."""

    async def delete_post(self, *, post_id: UUID) -> bool:
        """Delete one post and return whether a row was removed."""
