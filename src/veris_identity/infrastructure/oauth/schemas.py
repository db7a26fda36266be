"""Provider payload models.

Provider JSON is parsed into these models as soon as it arrives; nothing
past the verifier touches the raw payloads.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GoogleTokenResponse(BaseModel):
    """Response of Google's token endpoint."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(min_length=1)
    token_type: str = "Bearer"
    expires_in: int | None = None
    id_token: str | None = None
    scope: str | None = None


class _NamedClaims(BaseModel):
    """Claims shared by Google userinfo and provider ID tokens."""

    model_config = ConfigDict(extra="ignore")

    sub: str = ""
    email: str = ""
    name: str | None = None
    given_name: str | None = None
    family_name: str | None = None
    picture: str | None = None

    @field_validator("sub", "email", mode="before")
    @classmethod
    def _stringify(cls, v: object) -> str:
        return "" if v is None else str(v).strip()

    @property
    def first_name(self) -> str | None:
        """``given_name``, else the first word of ``name``."""
        if self.given_name:
            return self.given_name
        if self.name:
            return next(iter(self.name.split()), None)
        return None

    @property
    def last_name(self) -> str | None:
        """``family_name``, else everything after the first word of ``name``."""
        if self.family_name:
            return self.family_name
        if self.name:
            return " ".join(self.name.split()[1:]) or None
        return None


class GoogleUserInfoResponse(_NamedClaims):
    """Response of Google's userinfo endpoint."""


class IdTokenClaims(_NamedClaims):
    """Verified claims of a provider ID token."""

    iss: str
    aud: Union[str, list[str]]
    exp: int
    iat: int | None = None
    nonce: str | None = None
    email_verified: Union[bool, str, None] = None
