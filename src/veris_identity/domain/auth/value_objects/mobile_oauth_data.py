"""Credential material a mobile client submits for provider sign-in."""

from dataclasses import dataclass


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class MobileOAuthData:
    """Either an ID token, or an authorization code plus its PKCE verifier."""

    platform: str
    id_token: str | None = None
    code: str | None = None
    code_verifier: str | None = None

    @property
    def has_id_token(self) -> bool:
        return _present(self.id_token)

    @property
    def has_code(self) -> bool:
        return _present(self.code)

    @property
    def has_code_verifier(self) -> bool:
        return _present(self.code_verifier)

    def __repr__(self) -> str:
        return (
            f"MobileOAuthData(platform={self.platform!r}, "
            f"id_token={'<set>' if self.has_id_token else None}, "
            f"code={'<set>' if self.has_code else None})"
        )
