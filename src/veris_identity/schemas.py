"""Identity schemas shared across layers."""

from dataclasses import dataclass

from veris_identity.domain.auth.value_objects import OAuthProvider


@dataclass(frozen=True)
class OAuthUserInfo:
    """A provider-verified identity, produced once per sign-in and never persisted."""

    provider: OAuthProvider
    provider_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    picture: str | None = None
