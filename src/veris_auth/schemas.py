"""Auth schemas and data structures.

These are simple data classes used for transferring token data
between components.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenPayload:
    """Decoded JWT token payload.

    This represents the data extracted from a verified JWT token.

    Attributes
    ----------
    subject
        The identifier of the authenticated identity (``sub`` claim)
    email
        The identity's email address
    roles
        Role names granted to the identity
    token_type
        Either "access" or "refresh"
    exp
        Token expiration timestamp
    jti
        Unique token identifier
    """

    subject: str
    email: str
    roles: tuple[str, ...]
    token_type: str  # "access" or "refresh"
    exp: datetime
    jti: str

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return datetime.now(tz=self.exp.tzinfo) > self.exp

    def is_access_token(self) -> bool:
        """Check if this is an access token."""
        return self.token_type == "access"

    def is_refresh_token(self) -> bool:
        """Check if this is a refresh token."""
        return self.token_type == "refresh"


@dataclass(frozen=True)
class TokenPair:
    """A freshly issued access/refresh token pair."""

    access_token: str
    refresh_token: str

    def __repr__(self) -> str:
        return "TokenPair(access_token=<redacted>, refresh_token=<redacted>)"
