"""Immutable provider configuration.

Built once from Settings at composition time and shared by reference with
the verifiers. Nothing mutates it afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from veris_identity.domain.auth.value_objects import Platform
from veris_identity.exceptions import ConfigurationError

if TYPE_CHECKING:
    from veris_config import Settings

logger = logging.getLogger(__name__)

# Marker left in sample bundle ids; such a client id is treated as unset
PLACEHOLDER_MARKER = "yourapp"


def _secret(value) -> str:
    return value.get_secret_value() if value is not None else ""


def _unique(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(v for v in values if v))


@dataclass(frozen=True)
class GoogleOAuthConfig:
    """Google client ids for web and each mobile platform."""

    web_client_id: str = ""
    web_client_secret: str = field(default="", repr=False)
    web_redirect_uri: str = ""
    ios_client_id: str = ""
    android_client_id: str = ""
    ios_redirect_uri: str = ""
    android_redirect_uri: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> GoogleOAuthConfig:
        config = cls(
            web_client_id=settings.google_client_id,
            web_client_secret=_secret(settings.google_client_secret),
            web_redirect_uri=settings.google_callback_url,
            ios_client_id=settings.google_ios_client_id,
            android_client_id=settings.google_android_client_id,
            ios_redirect_uri=settings.google_mobile_callback_ios_url,
            android_redirect_uri=settings.google_mobile_callback_android_url,
        )
        status = config.configuration_status()
        logger.info(
            "Google OAuth configuration loaded - web: %s, ios: %s, android: %s",
            config.is_web_configured,
            status[Platform.IOS.value],
            status[Platform.ANDROID.value],
        )
        return config

    @property
    def is_web_configured(self) -> bool:
        return bool(self.web_client_id and self.web_client_secret and self.web_redirect_uri)

    def is_platform_configured(self, platform: str) -> bool:
        if platform == Platform.IOS.value:
            return bool(self.ios_client_id)
        if platform == Platform.ANDROID.value:
            return bool(self.android_client_id)
        return False

    def client_id(self, platform: str) -> str:
        """Client id for a mobile platform.

        Raises
        ------
        ConfigurationError
            If the platform has no client id
        """
        if not self.is_platform_configured(platform):
            raise ConfigurationError(f"Google OAuth client ID for {platform} is not configured")
        if platform == Platform.IOS.value:
            return self.ios_client_id
        return self.android_client_id

    def audience(self, platform: str) -> str:
        """Audience an ID token must carry; the platform's client id."""
        return self.client_id(platform)

    def redirect_uri(self, platform: str) -> str:
        self.client_id(platform)
        if platform == Platform.IOS.value:
            return self.ios_redirect_uri
        return self.android_redirect_uri

    def configuration_status(self) -> dict[str, bool]:
        return {p.value: self.is_platform_configured(p.value) for p in Platform}


@dataclass(frozen=True)
class AppleOAuthConfig:
    """Apple Sign-In client ids, audience allow-lists and signing key material."""

    ios_client_id: str = ""
    android_client_id: str = ""
    team_id: str = ""
    key_id: str = ""
    private_key: str = field(default="", repr=False)
    ios_additional_audiences: tuple[str, ...] = ()
    android_additional_audiences: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> AppleOAuthConfig:
        return cls(
            ios_client_id=settings.apple_ios_client_id,
            android_client_id=settings.apple_android_client_id,
            team_id=settings.apple_team_id,
            key_id=settings.apple_key_id,
            private_key=_secret(settings.apple_private_key),
            ios_additional_audiences=tuple(settings.apple_ios_audiences),
            android_additional_audiences=tuple(settings.apple_android_audiences),
        )

    def client_id(self, platform: str) -> str:
        if platform == Platform.IOS.value:
            return self.ios_client_id
        if platform == Platform.ANDROID.value:
            return self.android_client_id
        return ""

    def audiences(self, platform: str) -> list[str]:
        """Primary client id followed by the allow-list, de-duplicated in order."""
        if platform == Platform.IOS.value:
            extras = self.ios_additional_audiences
        elif platform == Platform.ANDROID.value:
            extras = self.android_additional_audiences
        else:
            extras = ()
        return list(_unique([self.client_id(platform), *extras]))

    def validate_platform(self, platform: str) -> list[str]:
        """Return the configuration problems for a platform; empty when usable."""
        errors: list[str] = []
        client_id = self.client_id(platform)
        if not client_id or PLACEHOLDER_MARKER in client_id:
            errors.append(f"{platform} client ID not configured properly")
        if not self.team_id:
            errors.append("Apple Team ID not configured")
        if not self.key_id:
            errors.append("Apple Key ID not configured")
        if not self.private_key:
            errors.append("Apple Private Key not configured")
        return errors
