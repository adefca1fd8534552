"""FastAPI router for signup, signin and account endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Request, Response

from blog_backend.application.dto.auth_models import (
    ChangePasswordRequest,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from blog_backend.application.ports.user_repository_port import UserRecord
from blog_backend.application.services.account_service import (
    AccountService,
    EmailAlreadyRegisteredError,
    InvalidCurrentPasswordError,
    InvalidUserEmailError,
    InvalidUserPasswordError,
)
from blog_backend.application.services.auth_service import AuthOutcome, AuthService
from blog_backend.infrastructure.http.auth_guard import AuthGuard, require_authenticated_user
from blog_backend.infrastructure.security.token_service import JwtTokenService


def build_user_router(
    *,
    account_service: AccountService,
    auth_service: AuthService,
    token_service: JwtTokenService,
    auth_guard: AuthGuard,
    prefix: str,
) -> APIRouter:
    """Build router exposing user signup, signin and account endpoints."""

    router = APIRouter(prefix=prefix, tags=["user"])

    @router.post("/signup", response_model=TokenResponse, status_code=201)
    async def signup(payload: SignupRequest, request: Request) -> TokenResponse:
        try:
            user = await account_service.sign_up(
                email=payload.email,
                password=payload.password,
                name=payload.name,
                ip_address=_client_ip(request),
                user_agent=request.headers.get("user-agent"),
            )
        except (InvalidUserEmailError, InvalidUserPasswordError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except EmailAlreadyRegisteredError as exc:
            raise HTTPException(status_code=409, detail="email already registered") from exc

        issued = token_service.issue_token(user_id=user.user_id)
        return TokenResponse(token=issued.token, expires_at=issued.expires_at)

    @router.post("/signin", response_model=TokenResponse)
    async def signin(payload: SigninRequest, request: Request) -> TokenResponse:
        result = await auth_service.authenticate(
            email=payload.email,
            password=payload.password,
            ip_address=_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
        if result.outcome is not AuthOutcome.SUCCESS or result.user is None:
            raise HTTPException(status_code=401, detail="invalid credentials")

        issued = token_service.issue_token(user_id=result.user.user_id)
        return TokenResponse(token=issued.token, expires_at=issued.expires_at)

    @router.get("/me", response_model=UserResponse)
    async def me(
        authorization: Annotated[str | None, Header()] = None,
    ) -> UserResponse:
        user = await require_authenticated_user(
            auth_guard=auth_guard,
            authorization_header=authorization,
        )
        return _to_user_response(user)

    @router.put("/password", status_code=204)
    async def change_password(
        payload: ChangePasswordRequest,
        authorization: Annotated[str | None, Header()] = None,
    ) -> Response:
        user = await require_authenticated_user(
            auth_guard=auth_guard,
            authorization_header=authorization,
        )
        try:
            await account_service.change_password(
                user_id=user.user_id,
                current_password=payload.current_password,
                new_password=payload.new_password,
            )
        except InvalidUserPasswordError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except InvalidCurrentPasswordError as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return Response(status_code=204)

    return router


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client is not None else None


def _to_user_response(user: UserRecord) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
    )
