"""Apple Sign-In: ID token verification with per-platform audience allow-lists."""

from __future__ import annotations

import logging

from veris_identity.domain.auth import AuthDomainService, OAuthProvider
from veris_identity.exceptions import ConfigurationError
from veris_identity.infrastructure.oauth.config import AppleOAuthConfig
from veris_identity.infrastructure.oauth.http import ProviderHttpClient
from veris_identity.infrastructure.oauth.id_token import IdTokenVerifier
from veris_identity.infrastructure.oauth.jwks import JWKSKeySet
from veris_identity.schemas import OAuthUserInfo

logger = logging.getLogger(__name__)

APPLE_ISSUERS = ("https://appleid.apple.com",)
APPLE_JWKS_URL = "https://appleid.apple.com/auth/keys"


class AppleIdentityVerifier:
    """Turns an Apple ID token into a trusted ``OAuthUserInfo``.

    A token is accepted for a platform when its ``aud`` is the platform's
    client id or one of the configured additional audiences (bundle id and
    service id variants).
    """

    def __init__(
        self,
        config: AppleOAuthConfig,
        http: ProviderHttpClient | None = None,
        timeout: float = 10.0,
        domain_service: AuthDomainService | None = None,
    ):
        self._config = config
        self._http = http or ProviderHttpClient("apple", timeout=timeout)
        self._key_set = JWKSKeySet(APPLE_JWKS_URL, self._http)
        self._id_tokens = IdTokenVerifier(self._key_set, APPLE_ISSUERS, OAuthProvider.APPLE)
        self._domain = domain_service or AuthDomainService()

    @property
    def config(self) -> AppleOAuthConfig:
        return self._config

    @property
    def ready(self) -> bool:
        return self._key_set.ready

    async def refresh_keys(self) -> None:
        await self._key_set.refresh()

    async def close(self) -> None:
        await self._http.close()

    async def verify_id_token(self, id_token: str, platform: str) -> OAuthUserInfo:
        """Verify an Apple ID token for the platform.

        Raises
        ------
        ConfigurationError
            If no audience is configured for the platform
        ProviderTokenError
            If the token is rejected
        """
        self._domain.validate_id_token_format(id_token, OAuthProvider.APPLE)
        audiences = self._config.audiences(platform)
        if not audiences:
            raise ConfigurationError(f"Apple client ID for {platform} is not configured")

        logger.info("Verifying Apple ID token for %s (%d audiences)", platform, len(audiences))
        claims = await self._id_tokens.verify(id_token, audiences)

        return OAuthUserInfo(
            provider=OAuthProvider.APPLE,
            provider_id=claims.sub,
            email=claims.email.lower(),
            first_name=claims.given_name or None,
            last_name=claims.family_name or None,
        )
