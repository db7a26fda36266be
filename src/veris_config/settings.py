"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. VERIS_ENV_FILE environment variable (absolute path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. VERIS_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("VERIS_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - the core refuses to start without these)
    jwt_secret_key: SecretStr  # Signs access tokens
    jwt_refresh_secret_key: SecretStr  # Signs refresh tokens, must differ

    # Application
    app_name: str = "veris"
    debug: bool = False

    # JWT
    jwt_issuer: str = "veris"
    jwt_access_token_expire_minutes: int = 60
    jwt_refresh_token_expire_days: int = 7

    # Password hashing (bcrypt work factor)
    password_hash_rounds: int = 12

    # Google OAuth (web)
    google_client_id: str = ""
    google_client_secret: SecretStr | None = None
    google_callback_url: str = ""

    # Google OAuth (mobile, per platform)
    google_ios_client_id: str = ""
    google_android_client_id: str = ""
    google_mobile_callback_ios_url: str = ""
    google_mobile_callback_android_url: str = ""

    # Apple Sign-In
    apple_team_id: str = ""
    apple_key_id: str = ""
    apple_private_key: SecretStr | None = None
    apple_ios_client_id: str = ""
    apple_android_client_id: str = ""
    apple_ios_additional_audiences: str = ""  # Comma-separated
    apple_android_additional_audiences: str = ""  # Comma-separated

    # Outbound provider calls
    oauth_http_timeout: float = 10.0

    # Post-registration visibility wait
    registration_visibility_timeout: float = 2.0
    registration_visibility_initial_delay: float = 0.02
    registration_visibility_max_delay: float = 0.25

    # Event delivery
    event_delivery_max_attempts: int = 3
    event_delivery_retry_delay: float = 0.05

    # Persistence
    database_url: str | None = None

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator(
        "apple_ios_additional_audiences",
        "apple_android_additional_audiences",
        mode="before",
    )
    @classmethod
    def _validate_audience_list(cls, v: Any) -> str:
        """Ensure audience lists are stored as comma-separated strings."""
        if isinstance(v, (list, tuple)):
            return ",".join(str(item) for item in v)
        return str(v) if v else ""

    @model_validator(mode="after")
    def _validate_distinct_jwt_secrets(self) -> Settings:
        access = self.jwt_secret_key.get_secret_value()
        refresh = self.jwt_refresh_secret_key.get_secret_value()
        if not access or not refresh:
            msg = "JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must be set"
            raise ValueError(msg)
        if access == refresh:
            msg = "JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ"
            raise ValueError(msg)
        return self

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def apple_ios_audiences(self) -> list[str]:
        """Parse additional iOS audiences from comma-separated string."""
        return _split_csv(self.apple_ios_additional_audiences)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def apple_android_audiences(self) -> list[str]:
        """Parse additional Android audiences from comma-separated string."""
        return _split_csv(self.apple_android_additional_audiences)


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_secret_key, jwt_refresh_secret_key) must be provided
    via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
