"""Unit tests for PasswordHashingService and refresh token digests."""

import pytest

from veris_auth.exceptions import WeakPasswordError
from veris_auth.services import (
    PasswordHashingService,
    hash_refresh_token,
    refresh_token_matches,
)


class TestPasswordHashingService:
    """Tests for password hashing and verification."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)  # Low rounds for fast tests

    def test_hash_returns_bcrypt_format(self):
        """Test that hash returns a valid bcrypt hash."""
        hashed = self.service.hash("Secret123")

        assert hashed.startswith("$2")
        assert len(hashed) >= 50

    def test_verify_correct_password(self):
        """Test that verify returns True for correct password."""
        hashed = self.service.hash("Secret123")

        assert self.service.verify("Secret123", hashed) is True

    def test_verify_incorrect_password(self):
        """Test that verify returns False for incorrect password."""
        hashed = self.service.hash("Secret123")

        assert self.service.verify("Secret124", hashed) is False

    def test_verify_invalid_hash_returns_false(self):
        """Test that verify returns False for invalid or missing hashes."""
        assert self.service.verify("Secret123", "not_a_valid_hash") is False
        assert self.service.verify("Secret123", "") is False

    def test_hash_produces_different_hashes(self):
        """Test that hashing the same password twice uses different salts."""
        hash1 = self.service.hash("Secret123")
        hash2 = self.service.hash("Secret123")

        assert hash1 != hash2
        assert self.service.verify("Secret123", hash1)
        assert self.service.verify("Secret123", hash2)

    def test_needs_rehash(self):
        """Test that a hash with another work factor needs rehashing."""
        hashed = self.service.hash("Secret123")

        assert self.service.needs_rehash(hashed) is False
        assert PasswordHashingService(rounds=5).needs_rehash(hashed) is True
        assert self.service.needs_rehash("garbage") is True


class TestPasswordValidation:
    """Tests for the bcrypt input limits."""

    def setup_method(self):
        """Set up test fixtures."""
        self.service = PasswordHashingService(rounds=4)

    def test_empty_password_raises(self):
        """Test that an empty password cannot be hashed."""
        with pytest.raises(WeakPasswordError, match="empty"):
            self.service.hash("")

    def test_password_over_72_bytes_raises(self):
        """Test that passwords past bcrypt's input limit are refused."""
        with pytest.raises(WeakPasswordError, match="72 bytes"):
            self.service.hash("Aa1" + "x" * 70)

    def test_multibyte_password_counts_bytes(self):
        """Test that the limit is measured in UTF-8 bytes, not characters."""
        password = "Aa1" + "ä" * 35  # 3 + 70 bytes

        with pytest.raises(WeakPasswordError):
            self.service.validate_hashable(password)

    def test_password_at_72_bytes_is_accepted(self):
        """Test the exact limit."""
        password = "Aa1" + "x" * 69
        hashed = self.service.hash(password)

        assert self.service.verify(password, hashed)

    def test_verify_overlong_password_returns_false(self):
        """Test that a password sharing a 72-byte prefix does not verify."""
        password = "Aa1" + "x" * 69
        hashed = self.service.hash(password)

        assert self.service.verify(password + "extra", hashed) is False


class TestRefreshTokenDigest:
    """Tests for refresh token digests."""

    def test_digest_is_stable(self):
        """Test that the same token always yields the same digest."""
        assert hash_refresh_token("token-a") == hash_refresh_token("token-a")
        assert len(hash_refresh_token("token-a")) == 64

    def test_tokens_with_long_shared_prefix_differ(self):
        """Test that tokens differing only after 72 bytes get distinct digests."""
        prefix = "p" * 200
        assert hash_refresh_token(prefix + "a") != hash_refresh_token(prefix + "b")

    def test_matches(self):
        """Test constant-time comparison against a stored digest."""
        stored = hash_refresh_token("token-a")

        assert refresh_token_matches("token-a", stored) is True
        assert refresh_token_matches("token-b", stored) is False
        assert refresh_token_matches("token-a", None) is False
        assert refresh_token_matches("", stored) is False
