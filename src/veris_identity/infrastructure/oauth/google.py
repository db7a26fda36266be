"""Google sign-in: ID token verification, PKCE code exchange and web OAuth."""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from pydantic import ValidationError as PydanticValidationError

from veris_identity.domain.auth import AuthDomainService, OAuthProvider
from veris_identity.exceptions import ConfigurationError, UnauthorizedError, ValidationError
from veris_identity.infrastructure.oauth.config import GoogleOAuthConfig
from veris_identity.infrastructure.oauth.http import ProviderHTTPError, ProviderHttpClient
from veris_identity.infrastructure.oauth.id_token import IdTokenVerifier
from veris_identity.infrastructure.oauth.jwks import JWKSKeySet
from veris_identity.infrastructure.oauth.schemas import (
    GoogleTokenResponse,
    GoogleUserInfoResponse,
    IdTokenClaims,
)
from veris_identity.schemas import OAuthUserInfo

logger = logging.getLogger(__name__)

GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")
GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_SCOPES = "openid email profile"


class GoogleIdentityVerifier:
    """Turns Google credentials into a trusted ``OAuthUserInfo``.

    Client-asserted identity fields are never trusted: identity comes either
    from a signature-checked ID token or from Google's userinfo endpoint
    called with a freshly exchanged access token.
    """

    def __init__(
        self,
        config: GoogleOAuthConfig,
        http: ProviderHttpClient | None = None,
        timeout: float = 10.0,
        domain_service: AuthDomainService | None = None,
    ):
        self._config = config
        self._http = http or ProviderHttpClient("google", timeout=timeout)
        self._key_set = JWKSKeySet(GOOGLE_JWKS_URL, self._http)
        self._id_tokens = IdTokenVerifier(self._key_set, GOOGLE_ISSUERS, OAuthProvider.GOOGLE)
        self._domain = domain_service or AuthDomainService()

    @property
    def config(self) -> GoogleOAuthConfig:
        return self._config

    @property
    def ready(self) -> bool:
        """Whether the signing keys have been fetched."""
        return self._key_set.ready

    async def refresh_keys(self) -> None:
        await self._key_set.refresh()

    async def close(self) -> None:
        await self._http.close()

    async def verify_id_token(self, id_token: str, platform: str) -> OAuthUserInfo:
        """Verify a Google ID token minted for the platform's client id.

        Raises
        ------
        ConfigurationError
            If the platform has no client id
        ProviderTokenError
            If the token is rejected (``AudienceInvalidError`` on audience
            mismatch)
        """
        self._domain.validate_id_token_format(id_token)
        audience = self._config.audience(platform)
        logger.info("Verifying Google ID token for %s", platform)

        claims = await self._id_tokens.verify(id_token, [audience])
        return self._from_claims(claims)

    async def exchange_authorization_code(
        self,
        code: str,
        code_verifier: str,
        platform: str,
    ) -> OAuthUserInfo:
        """Exchange a mobile authorization code (PKCE) and fetch the user's info."""
        self._domain.validate_authorization_code_format(code)
        self._domain.validate_code_verifier_format(code_verifier)
        logger.info("Exchanging Google authorization code for %s", platform)

        token = await self._exchange(
            {
                "code": code,
                "client_id": self._config.client_id(platform),
                "code_verifier": code_verifier,
                "grant_type": "authorization_code",
                "redirect_uri": self._config.redirect_uri(platform),
            },
        )
        return await self.fetch_user_info(token.access_token)

    def build_authorization_url(self, state: str) -> str:
        """Google consent URL for the web flow."""
        if not self._config.is_web_configured:
            raise ConfigurationError("Google OAuth is not configured for web")
        query = urlencode(
            {
                "client_id": self._config.web_client_id,
                "redirect_uri": self._config.web_redirect_uri,
                "response_type": "code",
                "scope": GOOGLE_SCOPES,
                "access_type": "offline",
                "state": state,
            },
        )
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    async def exchange_web_code(self, code: str) -> OAuthUserInfo:
        """Exchange a web-flow authorization code (confidential client)."""
        if not self._config.is_web_configured:
            raise ConfigurationError("Google OAuth is not configured for web")
        token = await self._exchange(
            {
                "code": code,
                "client_id": self._config.web_client_id,
                "client_secret": self._config.web_client_secret,
                "redirect_uri": self._config.web_redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        return await self.fetch_user_info(token.access_token)

    async def fetch_user_info(self, access_token: str) -> OAuthUserInfo:
        """Fetch the user's identity from Google's userinfo endpoint.

        Raises
        ------
        UnauthorizedError
            If Google rejects the access token or returns incomplete data
        UpstreamUnavailableError
            If Google cannot be reached
        """
        try:
            data = await self._http.get_json(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except ProviderHTTPError as e:
            logger.warning("Google userinfo rejected the access token (%d)", e.status_code)
            raise UnauthorizedError(
                "Failed to fetch user information",
                code="userinfo_rejected",
            ) from e

        try:
            info = GoogleUserInfoResponse.model_validate(data)
            self._domain.validate_provider_user_data(info.sub, info.email)
        except PydanticValidationError as e:
            raise UnauthorizedError(
                "Failed to fetch user information",
                code="userinfo_invalid",
            ) from e
        except ValidationError as e:
            raise UnauthorizedError(e.message, code=e.code) from e

        return self._from_claims(info)

    async def _exchange(self, form: dict[str, str]) -> GoogleTokenResponse:
        try:
            data = await self._http.post_form(GOOGLE_TOKEN_URL, form)
        except ProviderHTTPError as e:
            logger.warning(
                "Google token exchange rejected (%d, error=%s)",
                e.status_code,
                e.error or "unknown_error",
            )
            if e.error == "invalid_grant":
                raise UnauthorizedError(
                    "Invalid authorization code or code verifier",
                    code="invalid_grant",
                ) from e
            raise UnauthorizedError("Invalid authorization code", code="invalid_code") from e

        try:
            return GoogleTokenResponse.model_validate(data)
        except PydanticValidationError as e:
            raise UnauthorizedError(
                "No access token received from Google",
                code="invalid_token_response",
            ) from e

    def _from_claims(self, claims: GoogleUserInfoResponse | IdTokenClaims) -> OAuthUserInfo:
        return OAuthUserInfo(
            provider=OAuthProvider.GOOGLE,
            provider_id=claims.sub,
            email=claims.email.lower(),
            first_name=claims.first_name,
            last_name=claims.last_name,
            picture=claims.picture,
        )
