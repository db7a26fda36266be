"""Delete an identity together with its profile."""

import logging
from dataclasses import dataclass

from veris_identity.domain.auth import AuthStore
from veris_identity.domain.profile import ProfileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteAuthIdentityCommand:
    auth_id: str
    profile_id: str | None = None


class DeleteAuthIdentityHandler:
    """Handler for DeleteAuthIdentityCommand.

    Soft-deletes the identity and deletes its profile. Running it twice
    leaves the same state, so redelivered compensation is harmless.
    """

    def __init__(self, auth_store: AuthStore, profile_store: ProfileStore):
        self._auth_store = auth_store
        self._profile_store = profile_store

    async def execute(self, command: DeleteAuthIdentityCommand) -> None:
        profile = None
        if command.profile_id:
            profile = await self._profile_store.find_by_id(command.profile_id)
        if profile is None:
            profile = await self._profile_store.find_by_auth_id(command.auth_id)
        if profile is not None:
            await self._profile_store.delete(profile.id)

        deleted = await self._auth_store.soft_delete(command.auth_id)
        if deleted:
            logger.info("Identity %s deleted", command.auth_id)
        else:
            logger.info("Identity %s was already deleted", command.auth_id)
