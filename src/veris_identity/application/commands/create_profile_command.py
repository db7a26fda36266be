"""Create the profile of a freshly registered identity."""

import logging
from dataclasses import dataclass

from veris_identity.application.events import ProfileCreationFailed
from veris_identity.application.ports import EventBus
from veris_identity.domain.profile import ProfileDomainService, ProfileStore
from veris_identity.exceptions import ConflictError, IdentityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateProfileCommand:
    profile_id: str
    auth_id: str
    name: str = ""
    lastname: str = ""
    age: int = 0


class CreateProfileHandler:
    """Handler for CreateProfileCommand.

    Failures are not raised to the bus: they are turned into a
    ProfileCreationFailed event so the saga can compensate.
    """

    def __init__(
        self,
        profile_store: ProfileStore,
        event_bus: EventBus,
        domain_service: ProfileDomainService | None = None,
    ):
        self._profile_store = profile_store
        self._event_bus = event_bus
        self._domain = domain_service or ProfileDomainService()

    async def execute(self, command: CreateProfileCommand) -> None:
        try:
            existing = await self._profile_store.find_by_auth_id(command.auth_id)
            if not self._domain.can_create_profile(existing):
                # Redelivered event: the profile is already there
                logger.info("Profile for %s already exists, skipping", command.auth_id)
                return

            profile = self._domain.create_profile_entity(
                auth_id=command.auth_id,
                name=command.name,
                lastname=command.lastname,
                age=command.age,
                profile_id=command.profile_id,
            )
            await self._profile_store.create(profile)
        except ConflictError:
            logger.info("Profile for %s was created concurrently", command.auth_id)
            return
        except IdentityError as e:
            logger.warning(
                "Profile creation failed for %s (%s): %s",
                command.auth_id,
                e.code,
                e.message,
            )
            await self._publish_failure(command, e.message)
            return
        except Exception as e:
            # Any other store failure is reported too
            logger.exception("Profile store failed for %s", command.auth_id)
            await self._publish_failure(command, type(e).__name__)
            return

        logger.info("Profile %s created for %s", command.profile_id, command.auth_id)

    async def _publish_failure(self, command: CreateProfileCommand, error: str) -> None:
        await self._event_bus.publish(
            ProfileCreationFailed(
                auth_id=command.auth_id,
                profile_id=command.profile_id,
                error=error,
            ),
        )
