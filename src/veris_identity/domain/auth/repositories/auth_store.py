"""AuthIdentity store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from veris_identity.domain.auth.aggregates import AuthIdentity


class AuthStore(ABC):
    """Store interface for AuthIdentity aggregates.

    Soft-deleted identities are invisible to every lookup. Secrets (password
    hash, refresh-token digest) are blanked unless ``include_secrets`` is set.
    Uniqueness of email, Google id and Apple id among non-deleted identities
    is enforced here; violations raise ``ConflictError``.
    """

    @abstractmethod
    async def create(self, identity: AuthIdentity) -> AuthIdentity:
        """Persist a new identity; raise ConflictError on a uniqueness clash."""

    @abstractmethod
    async def find_by_email(
        self,
        email: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        """Find a non-deleted identity by email (case-insensitive)."""

    @abstractmethod
    async def find_by_id(
        self,
        auth_id: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        """Find a non-deleted identity by its id."""

    @abstractmethod
    async def find_by_google_id(self, google_id: str) -> Optional[AuthIdentity]:
        """Find a non-deleted identity linked to a Google subject."""

    @abstractmethod
    async def find_by_apple_id(self, apple_id: str) -> Optional[AuthIdentity]:
        """Find a non-deleted identity linked to an Apple subject."""

    @abstractmethod
    async def update(self, auth_id: str, **fields: Any) -> Optional[AuthIdentity]:
        """Apply a partial update; return the updated identity or None if absent."""

    @abstractmethod
    async def soft_delete(self, auth_id: str) -> bool:
        """Mark an identity deleted; return False if it was already gone."""

    @abstractmethod
    async def clear_refresh_token(self, auth_id: str) -> None:
        """Forget the stored refresh-token digest (idempotent)."""
