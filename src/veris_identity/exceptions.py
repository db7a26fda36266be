"""Identity exceptions.

Every failure surfaced by the identity core is one of the classes below.
Each carries a stable ``kind`` (the taxonomy bucket callers branch on), a
stable ``code`` (the specific reason) and a human-readable ``message``.
Library errors are translated into these at the boundary that calls the
library and never reach callers directly.
"""

from typing import Any


class IdentityError(Exception):
    """Base exception for all identity errors."""

    kind = "identity_error"
    code = "identity_error"
    default_message = "Identity error"
    retryable = False

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a caller-safe payload."""
        return {"kind": self.kind, "code": self.code, "message": self.message}


class ValidationError(IdentityError):
    """Malformed input caught before any I/O."""

    kind = "validation_error"
    code = "validation_error"
    default_message = "Invalid input"


class NotFoundError(IdentityError):
    """Referenced identity or profile does not exist (or is soft-deleted)."""

    kind = "not_found"
    code = "not_found"
    default_message = "Not found"


class UnauthorizedError(IdentityError):
    """Credential mismatch, invalid/revoked token or failed provider verification."""

    kind = "unauthorized"
    code = "unauthorized"
    default_message = "Unauthorized"


class ConflictError(IdentityError):
    """Uniqueness violation on email or provider id."""

    kind = "conflict"
    code = "conflict"
    default_message = "User already exists with this email"


class ConfigurationError(IdentityError):
    """A provider credential or audience is not configured for the platform."""

    kind = "configuration_error"
    code = "configuration_error"
    default_message = "Provider is not configured"


class UpstreamUnavailableError(IdentityError):
    """A provider network call failed or timed out."""

    kind = "upstream_unavailable"
    code = "upstream_unavailable"
    default_message = "Identity provider is unavailable"


class RegistrationFailedError(IdentityError):
    """The created identity did not become visible within the bounded wait.

    The registration may still complete shortly afterwards, so callers may
    retry (a retry of the same email then fails with ``ConflictError`` once
    the first attempt has landed).
    """

    kind = "registration_failed"
    code = "registration_failed"
    default_message = "Registration failed - user not found after creation"
    retryable = True


# Provider token verification failures. All of them are authentication
# failures; the code tells operators which check rejected the token.


class ProviderTokenError(UnauthorizedError):
    """Base class for rejected provider-issued tokens."""

    code = "invalid_token"
    default_message = "Invalid ID token"


class TokenExpiredError(ProviderTokenError):
    code = "token_expired"
    default_message = "ID token has expired"


class InvalidTokenFormatError(ProviderTokenError):
    code = "invalid_token_format"
    default_message = "Invalid ID token format"


class SignatureInvalidError(ProviderTokenError):
    code = "signature_invalid"
    default_message = "ID token signature verification failed"


class AudienceInvalidError(ProviderTokenError):
    code = "audience_invalid"
    default_message = "ID token audience mismatch"


class IssuerInvalidError(ProviderTokenError):
    code = "issuer_invalid"
    default_message = "ID token issuer invalid"


class MissingClaimsError(ProviderTokenError):
    code = "missing_claims"
    default_message = "ID token is missing required claims"


class NoMatchingKeyError(ProviderTokenError):
    code = "no_matching_key"
    default_message = "No matching key found in JWKS"
