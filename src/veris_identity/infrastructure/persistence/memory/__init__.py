from veris_identity.infrastructure.persistence.memory.auth_store import InMemoryAuthStore
from veris_identity.infrastructure.persistence.memory.profile_store import (
    InMemoryProfileStore,
)

__all__ = ["InMemoryAuthStore", "InMemoryProfileStore"]
