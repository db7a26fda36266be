"""Profile store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from veris_identity.domain.profile.aggregates import Profile


class ProfileStore(ABC):
    """Store interface for Profile aggregates (at most one per ``auth_id``)."""

    @abstractmethod
    async def create(self, profile: Profile) -> Profile:
        """Persist a new profile; raise ConflictError if one exists for its auth_id."""

    @abstractmethod
    async def find_by_auth_id(self, auth_id: str) -> Optional[Profile]:
        """Find the profile belonging to an identity."""

    @abstractmethod
    async def find_by_id(self, profile_id: str) -> Optional[Profile]:
        """Find a profile by its id."""

    @abstractmethod
    async def update(self, profile_id: str, **fields: Any) -> Optional[Profile]:
        """Apply a partial update; return the updated profile or None if absent."""

    @abstractmethod
    async def delete(self, profile_id: str) -> bool:
        """Delete a profile; return False if it did not exist."""
