"""Registration saga.

Keeps AuthIdentity and Profile consistent across their two write paths:

- AuthIdentityCreated -> CreateProfileCommand
- ProfileCreationFailed -> DeleteAuthIdentityCommand (compensation)

Both rules are stateless projections of a single event, so redelivery and
interleaving across registrations are harmless.
"""

import logging

from veris_identity.application.commands import (
    CreateProfileCommand,
    DeleteAuthIdentityCommand,
)
from veris_identity.application.events import AuthIdentityCreated, ProfileCreationFailed
from veris_identity.application.ports import CommandBus, EventBus

logger = logging.getLogger(__name__)


class RegistrationSaga:
    def __init__(self, command_bus: CommandBus):
        self._command_bus = command_bus

    def register(self, event_bus: EventBus) -> None:
        """Subscribe both rules to the event bus."""
        event_bus.subscribe(AuthIdentityCreated, self.on_auth_identity_created)
        event_bus.subscribe(ProfileCreationFailed, self.on_profile_creation_failed)

    async def on_auth_identity_created(self, event: AuthIdentityCreated) -> None:
        logger.info("Saga continues: creating profile for %s", event.auth_id)
        await self._command_bus.execute(
            CreateProfileCommand(
                profile_id=event.profile_id,
                auth_id=event.auth_id,
                name=event.first_name,
                lastname=event.last_name,
                age=event.age,
            ),
        )

    async def on_profile_creation_failed(self, event: ProfileCreationFailed) -> None:
        logger.warning("Saga compensates: deleting identity %s", event.auth_id)
        await self._command_bus.execute(
            DeleteAuthIdentityCommand(auth_id=event.auth_id, profile_id=event.profile_id),
        )
