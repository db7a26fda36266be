"""Unit tests for JWTService."""

from datetime import timedelta

import jwt
import pytest

from veris_auth.exceptions import InvalidTokenError
from veris_auth.services import JWTService

ACCESS_SECRET = "test-access-secret-12345"
REFRESH_SECRET = "test-refresh-secret-67890"


class TestJWTServiceInit:
    """Tests for JWTService initialization."""

    def test_init_with_valid_secrets(self):
        """Test that service initializes with two distinct secrets."""
        service = JWTService(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)
        assert service is not None

    def test_init_with_empty_secret_raises(self):
        """Test that an empty secret raises ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            JWTService(access_secret="", refresh_secret=REFRESH_SECRET)
        with pytest.raises(ValueError, match="cannot be empty"):
            JWTService(access_secret=ACCESS_SECRET, refresh_secret="")

    def test_init_with_equal_secrets_raises(self):
        """Test that access and refresh secrets must differ."""
        with pytest.raises(ValueError, match="distinct"):
            JWTService(access_secret="same", refresh_secret="same")


class TestAccessTokens:
    """Tests for access token creation and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = JWTService(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)
        self.subject = "auth-1234"
        self.email = "test@example.com"

    def test_verify_valid_access_token(self):
        """Test that a valid access token round-trips its claims."""
        token = self.service.create_access_token(self.subject, self.email, ["user"])

        payload = self.service.verify_access_token(token)

        assert payload.subject == self.subject
        assert payload.email == self.email
        assert payload.roles == ("user",)
        assert payload.is_access_token()
        assert not payload.is_refresh_token()

    def test_verify_expired_token_raises(self):
        """Test that an expired token raises InvalidTokenError."""
        token = self.service.create_access_token(
            self.subject,
            self.email,
            expires_delta=timedelta(seconds=-1),
        )

        with pytest.raises(InvalidTokenError, match="expired"):
            self.service.verify_access_token(token)

    def test_verify_invalid_token_raises(self):
        """Test that garbage raises InvalidTokenError."""
        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token("invalid.token.string")

    def test_verify_tampered_token_raises(self):
        """Test that a tampered token raises InvalidTokenError."""
        token = self.service.create_access_token(self.subject, self.email)
        tampered = token[:-5] + "xxxxx"

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(tampered)

    def test_verify_wrong_issuer_raises(self):
        """Test that a token from another issuer is rejected."""
        other = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            issuer="someone-else",
        )
        token = other.create_access_token(self.subject, self.email)

        with pytest.raises(InvalidTokenError, match="issuer"):
            self.service.verify_access_token(token)

    def test_token_without_type_claim_is_rejected(self):
        """Test that a correctly signed token without ``type`` is rejected."""
        token = jwt.encode(
            {"sub": self.subject, "iss": "veris", "iat": 0, "exp": 32503680000},
            ACCESS_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="Expected access token"):
            self.service.verify_access_token(token)


class TestRefreshTokens:
    """Tests for refresh token creation and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = JWTService(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)
        self.subject = "auth-1234"
        self.email = "test@example.com"

    def test_verify_refresh_token(self):
        """Test that a refresh token is verified with the refresh secret."""
        token = self.service.create_refresh_token(self.subject, self.email)

        payload = self.service.verify_refresh_token(token)

        assert payload.subject == self.subject
        assert payload.is_refresh_token()
        assert payload.jti

    def test_access_token_is_not_accepted_as_refresh_token(self):
        """Test that an access token cannot be replayed as a refresh token."""
        access = self.service.create_access_token(self.subject, self.email)

        with pytest.raises(InvalidTokenError):
            self.service.verify_refresh_token(access)

    def test_refresh_token_is_not_accepted_as_access_token(self):
        """Test that a refresh token cannot be used as an access token."""
        refresh = self.service.create_refresh_token(self.subject, self.email)

        with pytest.raises(InvalidTokenError):
            self.service.verify_access_token(refresh)

    def test_refresh_tokens_are_unique(self):
        """Test that two refresh tokens issued back to back differ."""
        first = self.service.create_refresh_token(self.subject, self.email)
        second = self.service.create_refresh_token(self.subject, self.email)

        assert first != second

    def test_token_pair(self):
        """Test that a token pair holds one token of each type."""
        pair = self.service.create_token_pair(self.subject, self.email, ["user", "admin"])

        access = self.service.verify_access_token(pair.access_token)
        refresh = self.service.verify_refresh_token(pair.refresh_token)

        assert access.roles == ("user", "admin")
        assert refresh.subject == self.subject
        assert "redacted" in repr(pair)


class TestTokenPayload:
    """Tests for TokenPayload methods."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = JWTService(
            access_secret=ACCESS_SECRET,
            refresh_secret=REFRESH_SECRET,
            access_token_expire_minutes=30,
        )

    def test_is_expired_returns_false_for_valid_token(self):
        """Test that is_expired returns False for a fresh token."""
        token = self.service.create_access_token("auth-1", "a@b.com")
        payload = self.service.verify_access_token(token)

        assert payload.is_expired() is False
        assert payload.exp.tzinfo is not None
