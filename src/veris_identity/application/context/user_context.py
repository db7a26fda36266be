"""User context for request-scoped caller identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from veris_identity.domain.auth import AuthIdentity


@dataclass(frozen=True)
class UserContext:
    """Immutable context for the current authenticated caller."""

    user_id: str
    email: str
    is_admin: bool = False

    @classmethod
    def create(cls, identity: AuthIdentity) -> UserContext:
        return cls(user_id=identity.id, email=identity.email, is_admin=identity.is_admin)

    @classmethod
    def from_values(
        cls,
        user_id: str,
        email: str,
        is_admin: bool = False,
    ) -> UserContext:
        return cls(user_id=user_id, email=email, is_admin=is_admin)

    def __str__(self) -> str:
        return f"UserContext({self.email})"
