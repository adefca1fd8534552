"""Pydantic models for blog post endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from blog_backend.application.dto.base import StrictModel


class PostCreateRequest(StrictModel):
    """HTTP request model for publishing a new post."""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    published: bool = False


class PostUpdateRequest(StrictModel):
    """HTTP request model for a partial post update."""

    title: str | None = None
    content: str | None = None
    published: bool | None = None


class PostResponse(StrictModel):
    """Public view of one post."""

    id: UUID
    author_id: UUID
    title: str
    content: str
    published: bool
    created_at: datetime
    updated_at: datetime


class PostListResponse(StrictModel):
    """Paginated post listing."""

    items: list[PostResponse]
    page: int
    page_size: int
    total: int
