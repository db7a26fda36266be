"""AuthIdentity aggregate: the credential-bearing record of a user."""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Union

from veris_identity.domain.auth.value_objects import Email, OAuthProvider, Role
from veris_identity.domain.shared.time import utc_now
from veris_identity.exceptions import ValidationError


def _coerce_roles(roles: Iterable[Union[str, Role]] | None) -> frozenset[Role]:
    if roles is None:
        return frozenset({Role.USER})
    coerced = frozenset(r if isinstance(r, Role) else Role(r) for r in roles)
    if not coerced:
        msg = "An identity must hold at least one role"
        raise ValidationError(msg)
    return coerced


class AuthIdentity:
    """
    AuthIdentity aggregate root.

    Holds email, password hash, roles, provider links and the digest of the
    current refresh token. The password hash and refresh-token digest are
    secrets: stores only return them when explicitly asked to.
    """

    # Fields a store may change through ``update``
    UPDATABLE_FIELDS = frozenset(
        {
            "email",
            "password_hash",
            "roles",
            "google_id",
            "apple_id",
            "current_refresh_token_hash",
            "last_login_at",
        },
    )

    def __init__(
        self,
        id: str,
        email: Union[str, Email],
        password_hash: str = "",
        roles: Iterable[Union[str, Role]] | None = None,
        google_id: str | None = None,
        apple_id: str | None = None,
        current_refresh_token_hash: str | None = None,
        last_login_at: datetime | None = None,
        deleted_at: datetime | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._id = id
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash or ""
        self._roles = _coerce_roles(roles)
        self._google_id = google_id or None
        self._apple_id = apple_id or None
        self._current_refresh_token_hash = current_refresh_token_hash or None
        self._last_login_at = last_login_at
        self._deleted_at = deleted_at
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or self._created_at

    @property
    def id(self) -> str:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def roles(self) -> frozenset[Role]:
        return self._roles

    @property
    def google_id(self) -> str | None:
        return self._google_id

    @property
    def apple_id(self) -> str | None:
        return self._apple_id

    @property
    def current_refresh_token_hash(self) -> str | None:
        return self._current_refresh_token_hash

    @property
    def last_login_at(self) -> datetime | None:
        return self._last_login_at

    @property
    def deleted_at(self) -> datetime | None:
        return self._deleted_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self._roles

    @property
    def is_deleted(self) -> bool:
        return self._deleted_at is not None

    @property
    def is_oauth_only(self) -> bool:
        """True when the identity has no password and can only sign in via a provider."""
        return not self._password_hash

    @property
    def role_names(self) -> tuple[str, ...]:
        """Role values in a stable order, as embedded in tokens."""
        return tuple(sorted(role.value for role in self._roles))

    def has_role(self, role: Union[str, Role]) -> bool:
        return Role(role) in self._roles

    def provider_id(self, provider: Union[str, OAuthProvider]) -> str | None:
        """Return the linked subject id for the given provider, if any."""
        provider = OAuthProvider(provider)
        if provider is OAuthProvider.GOOGLE:
            return self._google_id
        return self._apple_id

    def apply_changes(self, changes: Mapping[str, Any]) -> None:
        """Apply a partial update coming from a store.

        Raises
        ------
        ValueError
            If a field is not updatable
        """
        unknown = set(changes) - self.UPDATABLE_FIELDS
        if unknown:
            msg = f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        for name, value in changes.items():
            if name == "email":
                self._email = value if isinstance(value, Email) else Email(value)
            elif name == "roles":
                self._roles = _coerce_roles(value)
            elif name == "password_hash":
                self._password_hash = value or ""
            else:
                setattr(self, f"_{name}", value or None)
        self._updated_at = utc_now()

    def mark_deleted(self, when: datetime | None = None) -> None:
        self._deleted_at = when or utc_now()
        self._current_refresh_token_hash = None
        self._updated_at = self._deleted_at

    def without_secrets(self) -> "AuthIdentity":
        """Return a copy with the password hash and refresh-token digest blanked."""
        return self._copy(password_hash="", current_refresh_token_hash=None)

    def copy(self) -> "AuthIdentity":
        return self._copy()

    def _copy(self, **overrides: Any) -> "AuthIdentity":
        fields: dict[str, Any] = {
            "id": self._id,
            "email": self._email,
            "password_hash": self._password_hash,
            "roles": self._roles,
            "google_id": self._google_id,
            "apple_id": self._apple_id,
            "current_refresh_token_hash": self._current_refresh_token_hash,
            "last_login_at": self._last_login_at,
            "deleted_at": self._deleted_at,
            "created_at": self._created_at,
            "updated_at": self._updated_at,
        }
        fields.update(overrides)
        return AuthIdentity(**fields)

    @classmethod
    def create(
        cls,
        id: str,
        email: Union[str, Email],
        password_hash: str = "",
        roles: Iterable[Union[str, Role]] | None = None,
        google_id: str | None = None,
        apple_id: str | None = None,
    ) -> "AuthIdentity":
        return cls(
            id=id,
            email=email,
            password_hash=password_hash,
            roles=roles,
            google_id=google_id,
            apple_id=apple_id,
        )

    @classmethod
    def reconstitute(
        cls,
        id: str,
        email: Union[str, Email],
        password_hash: str,
        roles: Iterable[Union[str, Role]],
        google_id: str | None,
        apple_id: str | None,
        current_refresh_token_hash: str | None,
        last_login_at: datetime | None,
        deleted_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "AuthIdentity":
        return cls(
            id=id,
            email=email,
            password_hash=password_hash,
            roles=roles,
            google_id=google_id,
            apple_id=apple_id,
            current_refresh_token_hash=current_refresh_token_hash,
            last_login_at=last_login_at,
            deleted_at=deleted_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthIdentity):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"AuthIdentity(id={self._id}, email={self._email.value})"
