"""blog-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from datetime import timedelta

import uvicorn
from fastapi import FastAPI

from blog_backend.application.services.account_service import AccountService
from blog_backend.application.services.auth_service import AuthService
from blog_backend.application.services.post_service import PostService
from blog_backend.config.settings import load_settings
from blog_backend.infrastructure.db.auth_event_repository import SqlAlchemyAuthEventRepository
from blog_backend.infrastructure.db.post_repository import SqlAlchemyPostRepository
from blog_backend.infrastructure.db.session import create_session_factory
from blog_backend.infrastructure.db.user_repository import SqlAlchemyUserRepository
from blog_backend.infrastructure.http.auth_guard import AuthGuard
from blog_backend.infrastructure.http.blog_router import build_blog_router
from blog_backend.infrastructure.http.user_router import build_user_router
from blog_backend.infrastructure.logging import configure_logging
from blog_backend.infrastructure.security.password_hasher import Pbkdf2PasswordHasher
from blog_backend.infrastructure.security.token_service import JwtTokenService

BLOG_API_HOST = "0.0.0.0"
BLOG_API_PORT = 8000
logger = logging.getLogger(__name__)


def create_app(
    *,
    database_url: str | None = None,
    jwt_secret: str | None = None,
    token_service: JwtTokenService | None = None,
    password_hasher: Pbkdf2PasswordHasher | None = None,
    api_version: str | None = None,
) -> FastAPI:
    """Create FastAPI app exposing user and blog routes.

    Explicit arguments win over environment settings; settings are only
    loaded when something required is missing.
    """

    needs_settings = database_url is None or (token_service is None and jwt_secret is None)
    token_ttl = timedelta(hours=1)
    log_level = "INFO"
    if needs_settings:
        settings = load_settings()
        log_level = settings.log_level
        if database_url is None:
            database_url = settings.database_url
        if jwt_secret is None:
            jwt_secret = settings.jwt_secret
        if api_version is None:
            api_version = settings.api_version
        token_ttl = timedelta(seconds=settings.jwt_ttl_seconds)

    configure_logging(level=log_level)

    if token_service is None:
        assert jwt_secret is not None
        token_service = JwtTokenService(secret=jwt_secret, token_ttl=token_ttl)
    if password_hasher is None:
        password_hasher = Pbkdf2PasswordHasher()
    if api_version is None:
        api_version = "v1"

    assert database_url is not None
    session_factory = create_session_factory(database_url)
    users = SqlAlchemyUserRepository(session_factory)
    auth_events = SqlAlchemyAuthEventRepository(session_factory)

    account_service = AccountService(
        users=users,
        auth_events=auth_events,
        password_hasher=password_hasher,
    )
    auth_service = AuthService(
        users=users,
        auth_events=auth_events,
        password_hasher=password_hasher,
    )
    post_service = PostService(posts=SqlAlchemyPostRepository(session_factory))
    auth_guard = AuthGuard(token_service=token_service, user_repository=users)

    app = FastAPI(title="blog-api")
    app.include_router(
        build_user_router(
            account_service=account_service,
            auth_service=auth_service,
            token_service=token_service,
            auth_guard=auth_guard,
            prefix=f"/api/{api_version}/user",
        )
    )
    app.include_router(
        build_blog_router(
            post_service=post_service,
            auth_guard=auth_guard,
            prefix=f"/api/{api_version}/blog",
        )
    )

    @app.get("/test")
    async def liveness() -> dict[str, str]:
        return {"message": "server is active"}

    logger.info("blog_api_created api_version=%s", api_version)
    return app


def run_asgi_server(*, host: str = BLOG_API_HOST, port: int = BLOG_API_PORT) -> None:
    """Run blog-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.blog_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run blog-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
