"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from veris_config import Settings, clear_settings_cache, get_settings


def _settings(**overrides) -> Settings:
    values = {
        "jwt_secret_key": "access-secret",
        "jwt_refresh_secret_key": "refresh-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestJwtSecrets:
    """Tests for the required JWT secrets."""

    def test_missing_secrets_fail(self, monkeypatch):
        """Test that settings refuse to load without secrets."""
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        monkeypatch.delenv("JWT_REFRESH_SECRET_KEY", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_empty_secret_fails(self):
        """Test that an empty secret is rejected."""
        with pytest.raises(ValidationError, match="must be set"):
            _settings(jwt_secret_key="")

    def test_equal_secrets_fail(self):
        """Test that access and refresh secrets must differ."""
        with pytest.raises(ValidationError, match="must differ"):
            _settings(jwt_secret_key="same", jwt_refresh_secret_key="same")

    def test_secrets_are_hidden_in_repr(self):
        """Test that secrets do not leak through repr."""
        settings = _settings()

        assert "access-secret" not in repr(settings)
        assert settings.jwt_secret_key.get_secret_value() == "access-secret"


class TestDefaults:
    """Tests for default values and parsing."""

    def test_defaults(self):
        """Test the documented defaults."""
        settings = _settings()

        assert settings.jwt_issuer == "veris"
        assert settings.jwt_access_token_expire_minutes == 60
        assert settings.jwt_refresh_token_expire_days == 7
        assert settings.oauth_http_timeout == 10.0
        assert settings.registration_visibility_timeout == 2.0
        assert settings.event_delivery_max_attempts == 3

    def test_apple_audiences_from_csv(self):
        """Test that comma-separated audiences are split and trimmed."""
        settings = _settings(
            apple_ios_additional_audiences="com.example.app, com.example.app.service,,",
        )

        assert settings.apple_ios_audiences == ["com.example.app", "com.example.app.service"]
        assert settings.apple_android_audiences == []

    def test_apple_audiences_from_list(self):
        """Test that a list is accepted as well."""
        settings = _settings(apple_android_additional_audiences=["a.b", "c.d"])

        assert settings.apple_android_audiences == ["a.b", "c.d"]

    def test_env_variables_are_read(self, monkeypatch):
        """Test that values come from the environment."""
        monkeypatch.setenv("JWT_ISSUER", "from-env")
        monkeypatch.setenv("GOOGLE_IOS_CLIENT_ID", "ios-client")

        settings = _settings()

        assert settings.jwt_issuer == "from-env"
        assert settings.google_ios_client_id == "ios-client"


class TestSettingsCache:
    """Tests for get_settings caching."""

    def test_get_settings_is_cached(self):
        """Test that get_settings returns the same instance until cleared."""
        first = get_settings()

        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first
