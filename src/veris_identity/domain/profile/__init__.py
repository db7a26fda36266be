"""Profile domain: personal data aggregate, rules and store interface."""

from veris_identity.domain.profile.aggregates import Profile
from veris_identity.domain.profile.repositories import ProfileStore
from veris_identity.domain.profile.services import ProfileDomainService

__all__ = ["Profile", "ProfileDomainService", "ProfileStore"]
