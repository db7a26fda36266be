"""VERIS Identity - Registration, sign-in and session management.

This module handles all identity-related concerns:
- Password identities (register, login, change password, delete)
- Sessions (JWT access/refresh tokens with refresh-token rotation)
- Provider sign-in (Google web and mobile, Apple mobile)
- Profiles, kept consistent with identities by the registration saga

Identities and profiles are written through separate paths; a profile
appears shortly after its identity, and an identity whose profile cannot be
created is removed again.
"""

from veris_identity.application.context import UserContext
from veris_identity.application.dtos import (
    AccountView,
    AuthResult,
    MessageResult,
    OAuthInitiation,
    ProfileView,
)
from veris_identity.application.services import (
    AuthenticationService,
    ProfileService,
    VisibilityPolicy,
)
from veris_identity.domain.auth import (
    AuthDomainService,
    AuthIdentity,
    AuthStore,
    Email,
    MobileOAuthData,
    OAuthProvider,
    Platform,
    Role,
)
from veris_identity.domain.profile import Profile, ProfileDomainService, ProfileStore
from veris_identity.exceptions import (
    AudienceInvalidError,
    ConfigurationError,
    ConflictError,
    IdentityError,
    InvalidTokenFormatError,
    IssuerInvalidError,
    MissingClaimsError,
    NoMatchingKeyError,
    NotFoundError,
    ProviderTokenError,
    RegistrationFailedError,
    SignatureInvalidError,
    TokenExpiredError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
)
from veris_identity.schemas import OAuthUserInfo

__all__ = [
    # Application
    "AccountView",
    "AuthenticationService",
    "AuthResult",
    "MessageResult",
    "OAuthInitiation",
    "ProfileService",
    "ProfileView",
    "UserContext",
    "VisibilityPolicy",
    # Domain - Auth
    "AuthDomainService",
    "AuthIdentity",
    "AuthStore",
    "Email",
    "MobileOAuthData",
    "OAuthProvider",
    "Platform",
    "Role",
    # Domain - Profile
    "Profile",
    "ProfileDomainService",
    "ProfileStore",
    # Schemas
    "OAuthUserInfo",
    # Exceptions
    "AudienceInvalidError",
    "ConfigurationError",
    "ConflictError",
    "IdentityError",
    "InvalidTokenFormatError",
    "IssuerInvalidError",
    "MissingClaimsError",
    "NoMatchingKeyError",
    "NotFoundError",
    "ProviderTokenError",
    "RegistrationFailedError",
    "SignatureInvalidError",
    "TokenExpiredError",
    "UnauthorizedError",
    "UpstreamUnavailableError",
    "ValidationError",
]
