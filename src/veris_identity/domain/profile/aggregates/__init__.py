from veris_identity.domain.profile.aggregates.profile import Profile

__all__ = ["Profile"]
