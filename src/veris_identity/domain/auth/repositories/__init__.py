from veris_identity.domain.auth.repositories.auth_store import AuthStore

__all__ = ["AuthStore"]
