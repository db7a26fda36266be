"""SQLAlchemy model for the Profile aggregate."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from veris_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
    TimestampMixin,
)


class ProfileModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for persisting Profile aggregates.

    ``auth_id`` is not a foreign key; the profile is written by a separate
    handler after its identity.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    auth_id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    lastname: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ProfileModel(id={self.id}, auth_id={self.auth_id})>"
