"""FastAPI router for authenticated blog post endpoints."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header, HTTPException, Query, Response

from blog_backend.application.dto.post_models import (
    PostCreateRequest,
    PostListResponse,
    PostResponse,
    PostUpdateRequest,
)
from blog_backend.application.ports.post_repository_port import PostRecord
from blog_backend.application.services.post_service import (
    InvalidPostError,
    PostListQuery,
    PostNotFoundError,
    PostOwnershipError,
    PostService,
)
from blog_backend.infrastructure.http.auth_guard import AuthGuard, require_authenticated_user

_MAX_PAGE_SIZE = 100


def build_blog_router(
    *,
    post_service: PostService,
    auth_guard: AuthGuard,
    prefix: str,
) -> APIRouter:
    """Build router exposing blog post CRUD endpoints."""

    router = APIRouter(prefix=prefix, tags=["blog"])

    @router.post("", response_model=PostResponse, status_code=201)
    async def create_post(
        payload: PostCreateRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> PostResponse:
        user = await require_authenticated_user(
            auth_guard=auth_guard,
            authorization_header=authorization,
        )
        try:
            post = await post_service.create_post(
                author_id=user.user_id,
                title=payload.title,
                content=payload.content,
                published=payload.published,
            )
        except InvalidPostError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _to_post_response(post)

    # Declared before "/{post_id}" so "bulk" is not parsed as an id.
    @router.get("/bulk", response_model=PostListResponse)
    async def list_posts(
        page: int = Query(default=1, ge=1),
        page_size: int = Query(default=10, ge=1, le=_MAX_PAGE_SIZE),
        authorization: Annotated[str | None, Header()] = None,
    ) -> PostListResponse:
        await require_authenticated_user(auth_guard=auth_guard, authorization_header=authorization)
        result = await post_service.list_posts(PostListQuery(page=page, page_size=page_size))
        return PostListResponse(
            items=[_to_post_response(post) for post in result.items],
            page=result.page,
            page_size=result.page_size,
            total=result.total,
        )

    @router.get("/{post_id}", response_model=PostResponse)
    async def get_post(
        post_id: UUID,
        authorization: Annotated[str | None, Header()] = None,
    ) -> PostResponse:
        await require_authenticated_user(auth_guard=auth_guard, authorization_header=authorization)
        try:
            post = await post_service.get_post(post_id=post_id)
        except PostNotFoundError as exc:
            raise HTTPException(status_code=404, detail="post not found") from exc
        return _to_post_response(post)

    @router.put("/{post_id}", response_model=PostResponse)
    async def update_post(
        post_id: UUID,
        payload: PostUpdateRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> PostResponse:
        user = await require_authenticated_user(
            auth_guard=auth_guard,
            authorization_header=authorization,
        )
        try:
            post = await post_service.update_post(
                actor_user_id=user.user_id,
                post_id=post_id,
                title=payload.title,
                content=payload.content,
                published=payload.published,
            )
        except InvalidPostError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except PostNotFoundError as exc:
            raise HTTPException(status_code=404, detail="post not found") from exc
        except PostOwnershipError as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        return _to_post_response(post)

    @router.delete("/{post_id}", status_code=204)
    async def delete_post(
        post_id: UUID,
        authorization: Annotated[str | None, Header()] = None,
    ) -> Response:
        user = await require_authenticated_user(
            auth_guard=auth_guard,
            authorization_header=authorization,
        )
        try:
            await post_service.delete_post(actor_user_id=user.user_id, post_id=post_id)
        except PostNotFoundError as exc:
            raise HTTPException(status_code=404, detail="post not found") from exc
        except PostOwnershipError as exc:
            raise HTTPException(status_code=403, detail=str(exc)) from exc
        return Response(status_code=204)

    return router


def _to_post_response(post: PostRecord) -> PostResponse:
    return PostResponse(
        id=post.post_id,
        author_id=post.author_id,
        title=post.title,
        content=post.content,
        published=post.published,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )
