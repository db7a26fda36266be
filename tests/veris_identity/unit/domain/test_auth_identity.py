"""Unit tests for the AuthIdentity aggregate and auth value objects."""

import pytest

from veris_identity.domain.auth import AuthIdentity, Email, OAuthProvider, Platform, Role
from veris_identity.exceptions import ValidationError


class TestEmail:
    """Tests for the Email value object."""

    def test_normalizes_case_and_whitespace(self):
        assert Email("  User@Example.COM ").value == "user@example.com"

    def test_rejects_invalid(self):
        with pytest.raises(ValidationError, match="Invalid email format"):
            Email("not-an-email")

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            Email("")

    def test_equality_after_normalization(self):
        assert Email("A@B.com") == Email("a@b.com")


class TestAuthIdentity:
    """Tests for AuthIdentity behavior."""

    def test_defaults(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com")

        assert identity.roles == frozenset({Role.USER})
        assert identity.role_names == ("user",)
        assert not identity.is_admin
        assert not identity.is_deleted
        assert identity.is_oauth_only
        assert identity.created_at.tzinfo is not None

    def test_empty_roles_rejected(self):
        with pytest.raises(ValidationError, match="at least one role"):
            AuthIdentity.create(id="auth-1", email="a@b.com", roles=[])

    def test_role_names_are_sorted(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com", roles=["user", "admin"])

        assert identity.role_names == ("admin", "user")
        assert identity.is_admin

    def test_provider_id(self):
        identity = AuthIdentity.create(
            id="auth-1",
            email="a@b.com",
            google_id="g-1",
        )

        assert identity.provider_id(OAuthProvider.GOOGLE) == "g-1"
        assert identity.provider_id("apple") is None

    def test_apply_changes(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com", password_hash="h")

        identity.apply_changes({"email": "NEW@b.com", "current_refresh_token_hash": "d"})

        assert identity.email == "new@b.com"
        assert identity.current_refresh_token_hash == "d"

    def test_apply_changes_rejects_unknown_fields(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com")

        with pytest.raises(ValueError, match="deleted_at"):
            identity.apply_changes({"deleted_at": None})

    def test_without_secrets(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com", password_hash="h")
        identity.apply_changes({"current_refresh_token_hash": "digest"})

        public = identity.without_secrets()

        assert public.password_hash == ""
        assert public.current_refresh_token_hash is None
        assert identity.password_hash == "h"
        assert public == identity

    def test_mark_deleted_revokes_refresh_token(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com")
        identity.apply_changes({"current_refresh_token_hash": "digest"})

        identity.mark_deleted()

        assert identity.is_deleted
        assert identity.current_refresh_token_hash is None

    def test_copy_is_independent(self):
        identity = AuthIdentity.create(id="auth-1", email="a@b.com")
        clone = identity.copy()

        clone.apply_changes({"google_id": "g-1"})

        assert identity.google_id is None
        assert clone.google_id == "g-1"


class TestEnums:
    """Tests for enumerations."""

    def test_platform_values(self):
        assert Platform.values() == ("ios", "android")

    def test_placeholder_names(self):
        assert OAuthProvider.GOOGLE.placeholder_name == "Google User"
        assert OAuthProvider.APPLE.placeholder_name == "Apple User"
