from veris_identity.infrastructure.persistence.sqlalchemy.models.auth_identity_model import (
    AuthIdentityModel,
)
from veris_identity.infrastructure.persistence.sqlalchemy.models.profile_model import (
    ProfileModel,
)

__all__ = ["AuthIdentityModel", "ProfileModel"]
