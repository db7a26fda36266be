"""VERIS Auth - Generic credential and token infrastructure.

This package provides the credential codec that is independent of any
identity domain. It handles:
- Password hashing (bcrypt)
- JWT access/refresh token creation and verification
- Refresh token digests for rotation

Architecture:
    veris_auth/
    ├── services/           # Pure logic (password hashing, JWT, digests)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from veris_auth import PasswordHashingService, JWTService
"""

from veris_auth.exceptions import (
    AuthError,
    InvalidTokenError,
    WeakPasswordError,
)
from veris_auth.schemas import TokenPair, TokenPayload
from veris_auth.services import (
    JWTService,
    PasswordHashingService,
    hash_refresh_token,
    refresh_token_matches,
)

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    "hash_refresh_token",
    "refresh_token_matches",
    # Schemas
    "TokenPair",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
    "WeakPasswordError",
]
