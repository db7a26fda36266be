"""SQLAlchemy persistence for identities and profiles."""

from veris_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from veris_identity.infrastructure.persistence.sqlalchemy.models import (
    AuthIdentityModel,
    ProfileModel,
)
from veris_identity.infrastructure.persistence.sqlalchemy.repositories import (
    AuthStoreSQLAlchemy,
    ProfileStoreSQLAlchemy,
)

__all__ = [
    "AuthIdentityModel",
    "AuthStoreSQLAlchemy",
    "IdentityBase",
    "ProfileModel",
    "ProfileStoreSQLAlchemy",
]
