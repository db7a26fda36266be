"""Opaque identifiers with a readable domain prefix."""

from uuid import uuid4

AUTH_PREFIX = "auth"
PROFILE_PREFIX = "profile"
CATEGORY_PREFIX = "category"


def generate_id(prefix: str) -> str:
    """Return ``<prefix>-<uuid4>``; only uniqueness is guaranteed."""
    return f"{prefix}-{uuid4()}"
