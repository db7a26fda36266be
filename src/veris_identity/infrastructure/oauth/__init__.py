"""External identity verifiers (Google, Apple)."""

from veris_identity.infrastructure.oauth.apple import AppleIdentityVerifier
from veris_identity.infrastructure.oauth.config import AppleOAuthConfig, GoogleOAuthConfig
from veris_identity.infrastructure.oauth.google import GoogleIdentityVerifier
from veris_identity.infrastructure.oauth.http import ProviderHTTPError, ProviderHttpClient
from veris_identity.infrastructure.oauth.id_token import IdTokenVerifier
from veris_identity.infrastructure.oauth.jwks import JWKSKeySet

__all__ = [
    "AppleIdentityVerifier",
    "AppleOAuthConfig",
    "GoogleIdentityVerifier",
    "GoogleOAuthConfig",
    "IdTokenVerifier",
    "JWKSKeySet",
    "ProviderHTTPError",
    "ProviderHttpClient",
]
