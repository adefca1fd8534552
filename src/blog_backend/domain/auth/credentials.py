"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank values."""

    normalized = email.strip().lower()
    if not normalized:
        raise ValueError("email cannot be blank")
    return normalized


def require_user_password(*, password: str) -> str:
    """Reject blank or unencodable passwords and return the password exactly as typed.

    Passwords are hashed byte-for-byte, so surrounding whitespace is kept to
    make signup and signin derive from the same input.
    """

    if not password.strip():
        raise ValueError("password cannot be blank")
    try:
        password.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("password must be valid unicode text") from exc
    return password


def normalize_display_name(*, name: str | None) -> str | None:
    """Trim an optional author display name, mapping blank values to None."""

    if name is None:
        return None
    normalized = name.strip()
    return normalized or None
