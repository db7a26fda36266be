"""Application services."""

from veris_identity.application.services.authentication_service import (
    AuthenticationService,
)
from veris_identity.application.services.profile_service import ProfileService
from veris_identity.application.services.visibility import (
    VisibilityPolicy,
    wait_until_visible,
)

__all__ = [
    "AuthenticationService",
    "ProfileService",
    "VisibilityPolicy",
    "wait_until_visible",
]
