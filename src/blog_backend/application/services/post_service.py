"""Application service for author-scoped blog post operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from blog_backend.application.ports.post_repository_port import (
    PostCreateInput,
    PostPage,
    PostRecord,
    PostRepositoryPort,
    PostUpdateInput,
)
from blog_backend.domain.blog.post_content import normalize_post_content, normalize_post_title

logger = logging.getLogger(__name__)


class InvalidPostError(ValueError):
    """Raised when post fields fail normalization or an update is empty."""


class PostNotFoundError(LookupError):
    """Raised when a target post cannot be found."""

    def __init__(self, *, post_id: UUID) -> None:
        super().__init__(f"post not found: {post_id}")
        self.post_id = post_id


class PostOwnershipError(PermissionError):
    """Raised when a caller mutates a post they did not author."""

    def __init__(self, *, post_id: UUID) -> None:
        super().__init__("only the post author can modify this post")
        self.post_id = post_id


@dataclass(frozen=True)
class PostListQuery:
    """Pagination input for bulk post listing."""

    page: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class PostListResult:
    """Paginated post listing result."""

    items: list[PostRecord]
    page: int
    page_size: int
    total: int


class PostService:
    """Create, read, update, list and delete blog posts."""

    def __init__(self, *, posts: PostRepositoryPort) -> None:
        self._posts = posts

    async def create_post(
        self,
        *,
        author_id: UUID,
        title: str,
        content: str,
        published: bool = False,
    ) -> PostRecord:
        """Persist one post owned by the calling author."""

        try:
            normalized_title = normalize_post_title(title=title)
            normalized_content = normalize_post_content(content=content)
        except ValueError as exc:
            raise InvalidPostError(str(exc)) from exc

        post = await self._posts.create_post(
            PostCreateInput(
                post_id=uuid4(),
                author_id=author_id,
                title=normalized_title,
                content=normalized_content,
                published=published,
            )
        )
        logger.info("post_created post_id=%s author_id=%s", post.post_id, author_id)
        return post

    async def get_post(self, *, post_id: UUID) -> PostRecord:
        """Return one post or raise a deterministic not-found error."""

        post = await self._posts.get_by_id(post_id=post_id)
        if post is None:
            raise PostNotFoundError(post_id=post_id)
        return post

    async def list_posts(self, query: PostListQuery) -> PostListResult:
        """Return one page of posts ordered newest first."""

        if query.page < 1 or query.page_size < 1:
            raise InvalidPostError("page and page_size must be positive")

        page: PostPage = await self._posts.list_posts(
            limit=query.page_size,
            offset=(query.page - 1) * query.page_size,
        )
        return PostListResult(
            items=page.items,
            page=query.page,
            page_size=query.page_size,
            total=page.total,
        )

    async def update_post(
        self,
        *,
        actor_user_id: UUID,
        post_id: UUID,
        title: str | None = None,
        content: str | None = None,
        published: bool | None = None,
    ) -> PostRecord:
        """Apply a partial update when the caller is the post author."""

        if title is None and content is None and published is None:
            raise InvalidPostError("update must change at least one field")
        try:
            changes = PostUpdateInput(
                title=normalize_post_title(title=title) if title is not None else None,
                content=normalize_post_content(content=content) if content is not None else None,
                published=published,
            )
        except ValueError as exc:
            raise InvalidPostError(str(exc)) from exc

        await self._require_author(actor_user_id=actor_user_id, post_id=post_id)
        updated = await self._posts.update_post(post_id=post_id, changes=changes)
        if updated is None:
            raise PostNotFoundError(post_id=post_id)
        logger.info("post_updated post_id=%s author_id=%s", post_id, actor_user_id)
        return updated

    async def delete_post(self, *, actor_user_id: UUID, post_id: UUID) -> None:
        """Delete one post when the caller is the post author."""

        await self._require_author(actor_user_id=actor_user_id, post_id=post_id)
        if not await self._posts.delete_post(post_id=post_id):
            raise PostNotFoundError(post_id=post_id)
        logger.info("post_deleted post_id=%s author_id=%s", post_id, actor_user_id)

    async def _require_author(self, *, actor_user_id: UUID, post_id: UUID) -> PostRecord:
        """Return the target post or raise when missing or owned by someone else."""

        post = await self.get_post(post_id=post_id)
        if post.author_id != actor_user_id:
            logger.warning(
                "post_ownership_denied post_id=%s actor_user_id=%s",
                post_id,
                actor_user_id,
            )
            raise PostOwnershipError(post_id=post_id)
        return post
