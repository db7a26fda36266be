"""Result objects returned by the identity use cases."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from veris_identity.domain.auth import AuthIdentity
    from veris_identity.domain.profile import Profile


@dataclass(frozen=True)
class ProfileView:
    id: str
    auth_id: str
    name: str
    lastname: str
    age: int

    @classmethod
    def from_profile(cls, profile: Profile) -> ProfileView:
        return cls(
            id=profile.id,
            auth_id=profile.auth_id,
            name=profile.name,
            lastname=profile.lastname,
            age=profile.age,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "authId": self.auth_id,
            "name": self.name,
            "lastname": self.lastname,
            "age": self.age,
        }


@dataclass(frozen=True)
class AuthResult:
    """Token pair plus the profile, if it is already visible."""

    access_token: str
    refresh_token: str
    auth_id: str
    profile: ProfileView | None = None

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "profile": self.profile.to_dict() if self.profile else None,
        }

    def __repr__(self) -> str:
        return f"AuthResult(auth_id={self.auth_id!r}, profile={self.profile!r})"


@dataclass(frozen=True)
class AccountView:
    """Identity without secrets, with its profile when one exists."""

    auth_id: str
    email: str
    roles: tuple[str, ...]
    google_linked: bool
    apple_linked: bool
    profile: ProfileView | None = None

    @classmethod
    def create(cls, identity: AuthIdentity, profile: Profile | None) -> AccountView:
        return cls(
            auth_id=identity.id,
            email=identity.email,
            roles=identity.role_names,
            google_linked=identity.google_id is not None,
            apple_linked=identity.apple_id is not None,
            profile=ProfileView.from_profile(profile) if profile else None,
        )


@dataclass(frozen=True)
class MessageResult:
    message: str

    def to_dict(self) -> dict:
        return {"message": self.message}


@dataclass(frozen=True)
class OAuthInitiation:
    redirect_url: str
    state: str
