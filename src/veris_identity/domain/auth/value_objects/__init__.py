"""Value objects for the auth domain."""

from veris_identity.domain.auth.value_objects.email import Email
from veris_identity.domain.auth.value_objects.mobile_oauth_data import MobileOAuthData
from veris_identity.domain.auth.value_objects.oauth_provider import OAuthProvider
from veris_identity.domain.auth.value_objects.platform import Platform
from veris_identity.domain.auth.value_objects.role import Role

__all__ = [
    "Email",
    "MobileOAuthData",
    "OAuthProvider",
    "Platform",
    "Role",
]
