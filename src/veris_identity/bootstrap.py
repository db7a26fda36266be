"""Composition root for the identity core.

Wires the codec, domain services, buses, command handlers, the registration
saga, provider verifiers and the orchestrator from one Settings object.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from veris_auth import JWTService, PasswordHashingService
from veris_config import Settings, get_settings
from veris_identity.application.commands import (
    CreateAuthIdentityCommand,
    CreateAuthIdentityHandler,
    CreateProfileCommand,
    CreateProfileHandler,
    DeleteAuthIdentityCommand,
    DeleteAuthIdentityHandler,
)
from veris_identity.application.sagas import RegistrationSaga
from veris_identity.application.services import (
    AuthenticationService,
    ProfileService,
    VisibilityPolicy,
)
from veris_identity.domain.auth import AuthDomainService, AuthStore
from veris_identity.domain.profile import ProfileDomainService, ProfileStore
from veris_identity.infrastructure.messaging import InMemoryCommandBus, InMemoryEventBus
from veris_identity.infrastructure.oauth import (
    AppleIdentityVerifier,
    AppleOAuthConfig,
    GoogleIdentityVerifier,
    GoogleOAuthConfig,
    ProviderHttpClient,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure application logging.

    Sets up logging for the veris packages with:
    - Console output with timestamps and module names
    - Configurable log level for veris modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,  # Override any existing config
    )

    for name in ("veris_auth", "veris_identity", "veris_config"):
        logging.getLogger(name).setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@dataclass
class IdentityCore:
    """Everything a transport layer needs to serve the identity use cases."""

    auth_service: AuthenticationService
    profile_service: ProfileService
    command_bus: InMemoryCommandBus
    event_bus: InMemoryEventBus
    jwt_service: JWTService
    google_verifier: GoogleIdentityVerifier
    apple_verifier: AppleIdentityVerifier

    async def aclose(self) -> None:
        """Finish in-flight event deliveries and close provider HTTP clients."""
        await self.event_bus.drain()
        await self.google_verifier.close()
        await self.apple_verifier.close()


def build_identity_core(
    settings: Settings,
    auth_store: AuthStore,
    profile_store: ProfileStore,
    google_http: ProviderHttpClient | None = None,
    apple_http: ProviderHttpClient | None = None,
) -> IdentityCore:
    """Assemble the identity core.

    Parameters
    ----------
    settings
        Application settings (secrets, provider ids, timeouts)
    auth_store
        Store for AuthIdentity aggregates
    profile_store
        Store for Profile aggregates
    google_http, apple_http
        Provider HTTP clients; defaults use ``settings.oauth_http_timeout``

    Returns
    -------
    A wired ``IdentityCore``; call ``aclose()`` on shutdown
    """
    jwt_service = JWTService(
        access_secret=settings.jwt_secret_key.get_secret_value(),
        refresh_secret=settings.jwt_refresh_secret_key.get_secret_value(),
        issuer=settings.jwt_issuer,
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
        refresh_token_expire_days=settings.jwt_refresh_token_expire_days,
    )
    password_service = PasswordHashingService(rounds=settings.password_hash_rounds)
    auth_domain = AuthDomainService()
    profile_domain = ProfileDomainService()

    command_bus = InMemoryCommandBus()
    event_bus = InMemoryEventBus(
        max_attempts=settings.event_delivery_max_attempts,
        retry_delay=settings.event_delivery_retry_delay,
    )

    command_bus.register(
        CreateAuthIdentityCommand,
        CreateAuthIdentityHandler(auth_store, event_bus, password_service, auth_domain).execute,
    )
    command_bus.register(
        CreateProfileCommand,
        CreateProfileHandler(profile_store, event_bus, profile_domain).execute,
    )
    command_bus.register(
        DeleteAuthIdentityCommand,
        DeleteAuthIdentityHandler(auth_store, profile_store).execute,
    )
    RegistrationSaga(command_bus).register(event_bus)

    timeout = settings.oauth_http_timeout
    google_verifier = GoogleIdentityVerifier(
        GoogleOAuthConfig.from_settings(settings),
        http=google_http or ProviderHttpClient("google", timeout=timeout),
        domain_service=auth_domain,
    )
    apple_verifier = AppleIdentityVerifier(
        AppleOAuthConfig.from_settings(settings),
        http=apple_http or ProviderHttpClient("apple", timeout=timeout),
        domain_service=auth_domain,
    )

    auth_service = AuthenticationService(
        auth_store=auth_store,
        profile_store=profile_store,
        command_bus=command_bus,
        jwt_service=jwt_service,
        password_service=password_service,
        auth_domain=auth_domain,
        profile_domain=profile_domain,
        google_verifier=google_verifier,
        apple_verifier=apple_verifier,
        visibility_policy=VisibilityPolicy.from_settings(settings),
    )

    logger.info("Identity core assembled (issuer=%s)", settings.jwt_issuer)
    return IdentityCore(
        auth_service=auth_service,
        profile_service=ProfileService(profile_store, profile_domain),
        command_bus=command_bus,
        event_bus=event_bus,
        jwt_service=jwt_service,
        google_verifier=google_verifier,
        apple_verifier=apple_verifier,
    )
