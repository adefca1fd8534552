"""Pydantic models for signup, signin and account endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from blog_backend.application.dto.base import StrictModel


class SignupRequest(StrictModel):
    """HTTP request model for creating an author account."""

    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024)
    name: str | None = Field(default=None, max_length=120)


class SigninRequest(StrictModel):
    """HTTP request model for exchanging credentials for a token."""

    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024)


class TokenResponse(StrictModel):
    """HTTP response model carrying a signed bearer token."""

    token: str
    token_type: Literal["bearer"] = "bearer"
    expires_at: datetime


class ChangePasswordRequest(StrictModel):
    """HTTP request model for replacing the caller's password."""

    current_password: str = Field(min_length=1, max_length=1024)
    new_password: str = Field(min_length=1, max_length=1024)


class UserResponse(StrictModel):
    """Public view of one user account."""

    id: UUID
    email: str
    name: str | None
    created_at: datetime
