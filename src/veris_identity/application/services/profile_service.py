"""Profile use cases."""

import logging
from collections.abc import Mapping
from typing import Any

from veris_identity.application.context import UserContext
from veris_identity.application.dtos import ProfileView
from veris_identity.domain.profile import ProfileDomainService, ProfileStore
from veris_identity.exceptions import NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)


class ProfileService:
    """Read and update profiles on behalf of a caller."""

    def __init__(
        self,
        profile_store: ProfileStore,
        domain_service: ProfileDomainService | None = None,
    ):
        self._profile_store = profile_store
        self._domain = domain_service or ProfileDomainService()

    async def get_by_auth_id(self, auth_id: str) -> ProfileView:
        """Return the profile of an identity.

        Raises
        ------
        NotFoundError
            If the identity has no profile (yet)
        """
        profile = await self._profile_store.find_by_auth_id(auth_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return ProfileView.from_profile(profile)

    async def update_profile(
        self,
        profile_id: str,
        updates: Mapping[str, Any],
        requester: UserContext,
    ) -> ProfileView:
        """Update name, lastname or age of a profile.

        Raises
        ------
        NotFoundError
            If the profile does not exist
        UnauthorizedError
            If the requester neither owns the profile nor is an admin
        ValidationError
            If an updated field is invalid
        """
        existing = await self._profile_store.find_by_id(profile_id)
        validated = self._domain.validate_profile_update(existing, updates)

        if not self._domain.can_update_profile(existing, requester.user_id, requester.is_admin):
            logger.warning("User %s may not update profile %s", requester.user_id, profile_id)
            raise UnauthorizedError("Not allowed to update this profile", code="forbidden")

        if not validated:
            return ProfileView.from_profile(existing)

        updated = await self._profile_store.update(profile_id, **validated)
        if updated is None:
            raise NotFoundError("Profile not found")
        logger.info("Profile %s updated (%s)", profile_id, ", ".join(sorted(validated)))
        return ProfileView.from_profile(updated)

    async def is_profile_complete(self, auth_id: str) -> bool:
        profile = await self._profile_store.find_by_auth_id(auth_id)
        return profile is not None and self._domain.is_profile_complete(profile)
