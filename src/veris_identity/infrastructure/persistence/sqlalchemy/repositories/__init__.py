from veris_identity.infrastructure.persistence.sqlalchemy.repositories.auth_store import (
    AuthStoreSQLAlchemy,
)
from veris_identity.infrastructure.persistence.sqlalchemy.repositories.profile_store import (
    ProfileStoreSQLAlchemy,
)

__all__ = ["AuthStoreSQLAlchemy", "ProfileStoreSQLAlchemy"]
