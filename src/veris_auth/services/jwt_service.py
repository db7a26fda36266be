"""JWT token service.

Provides JWT access and refresh token creation and verification. Access and
refresh tokens are signed with distinct secrets so that one can never be
replayed as the other.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt

from veris_auth.exceptions import InvalidTokenError
from veris_auth.schemas import TokenPair, TokenPayload

ACCESS = "access"
REFRESH = "refresh"


class JWTService:
    """Service for JWT token creation and verification.

    Handles access tokens (short-lived) and refresh tokens (long-lived)
    for identity authentication.

    Examples
    --------
    >>> service = JWTService(access_secret="a-secret", refresh_secret="r-secret")
    >>> pair = service.create_token_pair("auth-123", "user@example.com", ["user"])
    >>> payload = service.verify_refresh_token(pair.refresh_token)
    >>> print(payload.subject)
    auth-123
    """

    DEFAULT_ACCESS_EXPIRE_MINUTES = 60
    DEFAULT_REFRESH_EXPIRE_DAYS = 7
    DEFAULT_ISSUER = "veris"
    ALGORITHM = "HS256"

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        issuer: str = DEFAULT_ISSUER,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
        refresh_token_expire_days: int = DEFAULT_REFRESH_EXPIRE_DAYS,
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        access_secret
            Secret key for signing access tokens. Must be kept secure.
        refresh_secret
            Secret key for signing refresh tokens. Must differ from
            ``access_secret``.
        issuer
            Value of the ``iss`` claim, checked on verification
        access_token_expire_minutes
            Minutes until access token expires (default 60)
        refresh_token_expire_days
            Days until refresh token expires (default 7)
        """
        if not access_secret or not refresh_secret:
            msg = "JWT secret keys cannot be empty"
            raise ValueError(msg)
        if access_secret == refresh_secret:
            msg = "Access and refresh secrets must be distinct"
            raise ValueError(msg)

        self._secrets = {ACCESS: access_secret, REFRESH: refresh_secret}
        self._issuer = issuer
        self._expiry = {
            ACCESS: timedelta(minutes=access_token_expire_minutes),
            REFRESH: timedelta(days=refresh_token_expire_days),
        }

    def create_access_token(
        self,
        subject: str,
        email: str,
        roles: Iterable[str] = (),
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived access token.

        Parameters
        ----------
        subject
            The identity's unique identifier
        email
            The identity's email address
        roles
            Role names to embed in the token
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(subject, email, roles, ACCESS, expires_delta)

    def create_refresh_token(
        self,
        subject: str,
        email: str,
        roles: Iterable[str] = (),
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a long-lived refresh token.

        Refresh tokens are used to obtain new token pairs without
        requiring the user to log in again. Each one carries a random
        ``jti`` so no two issued tokens are byte-identical.

        Parameters
        ----------
        subject
            The identity's unique identifier
        email
            The identity's email address
        roles
            Role names to embed in the token
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(subject, email, roles, REFRESH, expires_delta)

    def create_token_pair(
        self,
        subject: str,
        email: str,
        roles: Iterable[str] = (),
    ) -> TokenPair:
        """Create a new access/refresh token pair for an identity."""
        roles = tuple(roles)
        return TokenPair(
            access_token=self.create_access_token(subject, email, roles),
            refresh_token=self.create_refresh_token(subject, email, roles),
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        """Verify and decode an access token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or not an access token
        """
        return self._verify(token, ACCESS)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Verify and decode a refresh token.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or not a refresh token
        """
        return self._verify(token, REFRESH)

    def _verify(self, token: str, expected_type: str) -> TokenPayload:
        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self.ALGORITHM],
                issuer=self._issuer,
                options={"require": ["sub", "exp", "iat", "iss"]},
            )

            token_type = payload.get("type")
            if token_type != expected_type:
                msg = f"Expected {expected_type} token"
                raise InvalidTokenError(msg)

            return TokenPayload(
                subject=str(payload["sub"]),
                email=payload.get("email", ""),
                roles=tuple(payload.get("roles", ())),
                token_type=token_type,
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                jti=payload.get("jti", ""),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidIssuerError as e:
            raise InvalidTokenError("Token issuer is invalid") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

    def _create_token(
        self,
        subject: str,
        email: str,
        roles: Iterable[str],
        token_type: str,
        expires_delta: timedelta | None,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        expire = now + (expires_delta or self._expiry[token_type])

        payload = {
            "sub": subject,
            "email": email,
            "roles": list(roles),
            "type": token_type,
            "iss": self._issuer,
            "iat": now,
            "exp": expire,
            "jti": uuid4().hex,
        }

        return jwt.encode(payload, self._secrets[token_type], algorithm=self.ALGORITHM)
