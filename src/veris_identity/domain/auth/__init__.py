"""Auth domain: credential aggregate, rules and store interface."""

from veris_identity.domain.auth.aggregates import AuthIdentity
from veris_identity.domain.auth.repositories import AuthStore
from veris_identity.domain.auth.services import AuthDomainService
from veris_identity.domain.auth.value_objects import (
    Email,
    MobileOAuthData,
    OAuthProvider,
    Platform,
    Role,
)

__all__ = [
    "AuthDomainService",
    "AuthIdentity",
    "AuthStore",
    "Email",
    "MobileOAuthData",
    "OAuthProvider",
    "Platform",
    "Role",
]
