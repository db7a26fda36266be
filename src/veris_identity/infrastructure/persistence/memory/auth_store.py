"""In-memory AuthIdentity store."""

from __future__ import annotations

from typing import Any, Optional

from veris_identity.domain.auth import AuthIdentity, AuthStore
from veris_identity.exceptions import ConflictError

_UNIQUE_FIELDS = ("email", "google_id", "apple_id")


class InMemoryAuthStore(AuthStore):
    """Dict-backed store for tests and single-process use.

    Every check-and-write runs without an ``await`` in between, so on one
    event loop concurrent creations of the same email cannot both succeed.
    """

    def __init__(self) -> None:
        self._identities: dict[str, AuthIdentity] = {}

    async def create(self, identity: AuthIdentity) -> AuthIdentity:
        if identity.id in self._identities:
            raise ConflictError(f"Identity {identity.id} already exists")
        self._check_unique(identity, exclude_id=None)
        self._identities[identity.id] = identity.copy()
        return identity.without_secrets()

    async def find_by_email(
        self,
        email: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        normalized = email.strip().lower()
        return self._find(lambda i: i.email == normalized, include_secrets)

    async def find_by_id(
        self,
        auth_id: str,
        include_secrets: bool = False,
    ) -> Optional[AuthIdentity]:
        identity = self._identities.get(auth_id)
        if identity is None or identity.is_deleted:
            return None
        return self._expose(identity, include_secrets)

    async def find_by_google_id(self, google_id: str) -> Optional[AuthIdentity]:
        return self._find(lambda i: i.google_id == google_id, include_secrets=False)

    async def find_by_apple_id(self, apple_id: str) -> Optional[AuthIdentity]:
        return self._find(lambda i: i.apple_id == apple_id, include_secrets=False)

    async def update(self, auth_id: str, **fields: Any) -> Optional[AuthIdentity]:
        current = self._identities.get(auth_id)
        if current is None or current.is_deleted:
            return None

        candidate = current.copy()
        candidate.apply_changes(fields)
        self._check_unique(candidate, exclude_id=auth_id)
        self._identities[auth_id] = candidate
        return candidate.without_secrets()

    async def soft_delete(self, auth_id: str) -> bool:
        identity = self._identities.get(auth_id)
        if identity is None or identity.is_deleted:
            return False
        identity.mark_deleted()
        return True

    async def clear_refresh_token(self, auth_id: str) -> None:
        identity = self._identities.get(auth_id)
        if identity is not None and not identity.is_deleted:
            identity.apply_changes({"current_refresh_token_hash": None})

    def _find(self, predicate, include_secrets: bool) -> Optional[AuthIdentity]:
        for identity in self._identities.values():
            if not identity.is_deleted and predicate(identity):
                return self._expose(identity, include_secrets)
        return None

    def _expose(self, identity: AuthIdentity, include_secrets: bool) -> AuthIdentity:
        return identity.copy() if include_secrets else identity.without_secrets()

    def _check_unique(self, candidate: AuthIdentity, exclude_id: str | None) -> None:
        for other in self._identities.values():
            if other.is_deleted or other.id == exclude_id:
                continue
            for name in _UNIQUE_FIELDS:
                value = getattr(candidate, name)
                if value is not None and value == getattr(other, name):
                    if name == "email":
                        raise ConflictError()
                    raise ConflictError(
                        f"Account already linked to another user ({name})",
                        code=f"{name}_taken",
                    )
