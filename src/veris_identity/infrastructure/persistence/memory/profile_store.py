"""In-memory Profile store."""

from __future__ import annotations

from typing import Any, Optional

from veris_identity.domain.profile import Profile, ProfileStore
from veris_identity.exceptions import ConflictError


class InMemoryProfileStore(ProfileStore):
    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}

    async def create(self, profile: Profile) -> Profile:
        if profile.id in self._profiles:
            raise ConflictError(f"Profile {profile.id} already exists")
        if any(p.auth_id == profile.auth_id for p in self._profiles.values()):
            raise ConflictError("Profile already exists for this user")
        self._profiles[profile.id] = profile.copy()
        return profile.copy()

    async def find_by_auth_id(self, auth_id: str) -> Optional[Profile]:
        for profile in self._profiles.values():
            if profile.auth_id == auth_id:
                return profile.copy()
        return None

    async def find_by_id(self, profile_id: str) -> Optional[Profile]:
        profile = self._profiles.get(profile_id)
        return profile.copy() if profile else None

    async def update(self, profile_id: str, **fields: Any) -> Optional[Profile]:
        profile = self._profiles.get(profile_id)
        if profile is None:
            return None
        profile.apply_changes(fields)
        return profile.copy()

    async def delete(self, profile_id: str) -> bool:
        return self._profiles.pop(profile_id, None) is not None
