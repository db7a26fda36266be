from veris_identity.domain.profile.services.profile_domain_service import (
    ProfileDomainService,
)

__all__ = ["ProfileDomainService"]
