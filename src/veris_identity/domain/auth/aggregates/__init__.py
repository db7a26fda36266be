from veris_identity.domain.auth.aggregates.auth_identity import AuthIdentity

__all__ = ["AuthIdentity"]
