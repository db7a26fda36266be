from veris_identity.domain.profile.repositories.profile_store import ProfileStore

__all__ = ["ProfileStore"]
