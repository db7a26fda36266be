"""SQLAlchemy model for the AuthIdentity aggregate."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from veris_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
    TimestampMixin,
)

_ACTIVE = text("deleted_at IS NULL")


def _active_unique_index(column: str) -> Index:
    # Unique among non-deleted rows only
    return Index(
        f"uq_auth_identities_{column}_active",
        column,
        unique=True,
        postgresql_where=_ACTIVE,
        sqlite_where=_ACTIVE,
    )


class AuthIdentityModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for persisting AuthIdentity aggregates.

    Roles are stored as a comma-separated list of role values.
    """

    __tablename__ = "auth_identities"
    __table_args__ = (
        _active_unique_index("email"),
        _active_unique_index("google_id"),
        _active_unique_index("apple_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    roles: Mapped[str] = mapped_column(String(100), nullable=False, default="user")
    google_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    apple_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    current_refresh_token_hash: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<AuthIdentityModel(id={self.id}, email={self.email})>"
