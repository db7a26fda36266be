"""Profile aggregate: user-facing personal data, one per AuthIdentity."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from veris_identity.domain.shared.time import utc_now


class Profile:
    """
    Profile aggregate root.

    Linked to an AuthIdentity through ``auth_id``. The link is not
    transactional: a profile is created after its identity, from an event.
    """

    UPDATABLE_FIELDS = frozenset({"name", "lastname", "age"})

    def __init__(
        self,
        id: str,
        auth_id: str,
        name: str = "",
        lastname: str = "",
        age: int = 0,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._id = id
        self._auth_id = auth_id
        self._name = name or ""
        self._lastname = lastname or ""
        self._age = age or 0
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> str:
        return self._id

    @property
    def auth_id(self) -> str:
        return self._auth_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def lastname(self) -> str:
        return self._lastname

    @property
    def age(self) -> int:
        return self._age

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def apply_changes(self, changes: Mapping[str, Any]) -> None:
        unknown = set(changes) - self.UPDATABLE_FIELDS
        if unknown:
            msg = f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        for name, value in changes.items():
            setattr(self, f"_{name}", value)
        self._updated_at = utc_now()

    def copy(self) -> "Profile":
        return Profile(
            id=self._id,
            auth_id=self._auth_id,
            name=self._name,
            lastname=self._lastname,
            age=self._age,
            created_at=self._created_at,
            updated_at=self._updated_at,
        )

    @classmethod
    def create(
        cls,
        id: str,
        auth_id: str,
        name: str = "",
        lastname: str = "",
        age: int = 0,
    ) -> "Profile":
        return cls(id=id, auth_id=auth_id, name=name, lastname=lastname, age=age)

    @classmethod
    def reconstitute(
        cls,
        id: str,
        auth_id: str,
        name: str,
        lastname: str,
        age: int,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Profile":
        return cls(
            id=id,
            auth_id=auth_id,
            name=name,
            lastname=lastname,
            age=age,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Profile(id={self._id}, auth_id={self._auth_id})"
