"""Normalization rules for blog post fields."""

from __future__ import annotations

MAX_TITLE_LENGTH = 200


def normalize_post_title(*, title: str) -> str:
    """Trim one post title and reject blank or oversized values."""

    normalized = title.strip()
    if not normalized:
        raise ValueError("title cannot be blank")
    if len(normalized) > MAX_TITLE_LENGTH:
        raise ValueError(f"title cannot exceed {MAX_TITLE_LENGTH} characters")
    return normalized


def normalize_post_content(*, content: str) -> str:
    """Trim one post body and reject blank values."""

    normalized = content.strip()
    if not normalized:
        raise ValueError("content cannot be blank")
    return normalized
