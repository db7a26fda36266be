"""Refresh token digests.

Only a digest of the current refresh token is persisted. SHA-256 is used
rather than bcrypt because bcrypt ignores everything past 72 bytes, and all
refresh tokens of one subject share a longer prefix than that.
"""

import hashlib
import hmac


def hash_refresh_token(token: str) -> str:
    """Return the hex SHA-256 digest of a refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def refresh_token_matches(token: str, stored_hash: str | None) -> bool:
    """Check a presented refresh token against the stored digest in constant time."""
    if not token or not stored_hash:
        return False
    return hmac.compare_digest(hash_refresh_token(token), stored_hash)
