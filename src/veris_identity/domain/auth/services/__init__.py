from veris_identity.domain.auth.services.auth_domain_service import AuthDomainService

__all__ = ["AuthDomainService"]
