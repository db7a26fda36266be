"""Create an AuthIdentity and announce it to the registration saga."""

import logging
from dataclasses import dataclass, field

from veris_auth.services import PasswordHashingService
from veris_identity.application.events import AuthIdentityCreated
from veris_identity.application.ports import EventBus
from veris_identity.domain.auth import AuthDomainService, AuthStore, OAuthProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateAuthIdentityCommand:
    """Create a password identity, or a provider-linked one when ``provider`` is set."""

    auth_id: str
    profile_id: str
    email: str
    password: str = field(default="", repr=False)
    provider: OAuthProvider | None = None
    provider_id: str | None = None
    first_name: str = ""
    last_name: str = ""
    age: int = 0


class CreateAuthIdentityHandler:
    """Handler for CreateAuthIdentityCommand."""

    def __init__(
        self,
        auth_store: AuthStore,
        event_bus: EventBus,
        password_service: PasswordHashingService,
        domain_service: AuthDomainService | None = None,
    ):
        self._auth_store = auth_store
        self._event_bus = event_bus
        self._password_service = password_service
        self._domain = domain_service or AuthDomainService()

    async def execute(self, command: CreateAuthIdentityCommand) -> None:
        """Store the identity, then publish AuthIdentityCreated.

        Raises
        ------
        ConflictError
            If a non-deleted identity already holds the email or provider id,
            whether found up front or rejected by the store
        """
        kind = command.provider.value if command.provider else "password"
        logger.info("Creating %s identity %s for %s", kind, command.auth_id, command.email)

        existing = await self._auth_store.find_by_email(command.email)
        password_hash = (
            self._password_service.hash(command.password) if command.password else ""
        )
        identity = self._domain.create_identity(
            email=command.email,
            existing=existing,
            password_hash=password_hash,
            provider=command.provider,
            provider_id=command.provider_id,
            auth_id=command.auth_id,
        )

        await self._auth_store.create(identity)
        logger.info("Identity %s stored, publishing AuthIdentityCreated", identity.id)

        await self._event_bus.publish(
            AuthIdentityCreated(
                auth_id=identity.id,
                profile_id=command.profile_id,
                first_name=command.first_name,
                last_name=command.last_name,
                age=command.age,
            ),
        )
