"""Authentication services.

Provides password hashing, JWT token management and refresh token digests.
"""

from veris_auth.services.jwt_service import JWTService
from veris_auth.services.password_service import PasswordHashingService
from veris_auth.services.token_digest import hash_refresh_token, refresh_token_matches

__all__ = [
    "PasswordHashingService",
    "JWTService",
    "hash_refresh_token",
    "refresh_token_matches",
]
