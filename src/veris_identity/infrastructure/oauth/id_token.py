"""Verification of provider-issued ID tokens against a JWKS."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import jwt
from pydantic import ValidationError as PydanticValidationError

from veris_identity.domain.auth.value_objects import OAuthProvider
from veris_identity.domain.auth.value_objects.email import EMAIL_PATTERN
from veris_identity.exceptions import (
    AudienceInvalidError,
    InvalidTokenFormatError,
    IssuerInvalidError,
    MissingClaimsError,
    ProviderTokenError,
    SignatureInvalidError,
    TokenExpiredError,
)
from veris_identity.infrastructure.oauth.jwks import JWKSKeySet
from veris_identity.infrastructure.oauth.schemas import IdTokenClaims

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("RS256", "ES256")
REQUIRED_CLAIMS = ("sub", "email")


class IdTokenVerifier:
    """Verify signature, expiry, audience, issuer and required claims of an ID token.

    Every failure is raised as a ``ProviderTokenError`` subclass naming the
    check that rejected the token.
    """

    # Allowed clock skew between us and the provider, in seconds
    LEEWAY_SECONDS = 5

    def __init__(
        self,
        key_set: JWKSKeySet,
        issuers: Sequence[str],
        provider: OAuthProvider,
    ):
        self._key_set = key_set
        self._issuers = tuple(issuers)
        self._provider = provider

    @property
    def key_set(self) -> JWKSKeySet:
        return self._key_set

    async def verify(self, id_token: str, audiences: Sequence[str]) -> IdTokenClaims:
        """Verify an ID token for any of the given audiences.

        Raises
        ------
        ProviderTokenError
            Or one of its subclasses, if any check fails
        UpstreamUnavailableError
            If the key set cannot be fetched
        """
        try:
            header = jwt.get_unverified_header(id_token)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenFormatError() from e

        algorithm = header.get("alg")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise InvalidTokenFormatError(f"Unsupported ID token algorithm: {algorithm}")

        signing_key = await self._key_set.get_signing_key(header.get("kid"))

        try:
            payload = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=[algorithm],
                audience=list(audiences),
                leeway=self.LEEWAY_SECONDS,
                options={"require": ["exp", "iss", "aud"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidAudienceError as e:
            self._log_audience_mismatch(id_token, audiences)
            raise AudienceInvalidError() from e
        except jwt.MissingRequiredClaimError as e:
            raise MissingClaimsError(f"Missing required claims: {e.claim}") from e
        except jwt.InvalidSignatureError as e:
            raise SignatureInvalidError() from e
        except jwt.DecodeError as e:
            raise InvalidTokenFormatError() from e
        except jwt.InvalidTokenError as e:
            raise ProviderTokenError(f"ID token verification failed: {type(e).__name__}") from e

        if payload.get("iss") not in self._issuers:
            logger.warning(
                "%s ID token issuer %r not in %s",
                self._provider.value,
                payload.get("iss"),
                list(self._issuers),
            )
            raise IssuerInvalidError()

        missing = [claim for claim in REQUIRED_CLAIMS if not payload.get(claim)]
        if missing:
            raise MissingClaimsError(f"Missing required claims: {', '.join(missing)}")

        try:
            claims = IdTokenClaims.model_validate(payload)
        except PydanticValidationError as e:
            raise InvalidTokenFormatError() from e

        if not claims.sub:
            raise MissingClaimsError("Invalid subject claim in ID token")
        if not EMAIL_PATTERN.fullmatch(claims.email):
            raise ProviderTokenError("Invalid email format in ID token", code="invalid_email")

        return claims

    def _log_audience_mismatch(self, id_token: str, expected: Sequence[str]) -> None:
        try:
            unverified = jwt.decode(id_token, options={"verify_signature": False})
            token_aud = unverified.get("aud")
        except jwt.InvalidTokenError:
            token_aud = "<undecodable>"
        logger.warning(
            "%s ID token audience mismatch. token aud=%s expected one of=%s",
            self._provider.value,
            token_aud,
            list(expected),
        )
