"""Password hashing service using bcrypt.

Provides salted, cost-factored password hashing and verification.
"""

import bcrypt

from veris_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.
    Strength policy (character classes etc.) belongs to the domain layer;
    this service only refuses input bcrypt cannot hash faithfully.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("Secret123")
    >>> service.verify("Secret123", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # bcrypt only looks at the first 72 bytes of its input
    MAX_BYTES = 72

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
            Higher values are more secure but slower.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        WeakPasswordError
            If password is empty or longer than bcrypt can handle
        """
        self.validate_hashable(password)
        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        bcrypt's comparison runs over the full digest regardless of where
        the first mismatch occurs.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against (empty for OAuth-only identities)

        Returns
        -------
        True if password matches, False otherwise
        """
        if not password or not password_hash:
            return False
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Invalid hash format
            return False

    def validate_hashable(self, password: str) -> None:
        """Validate that a password can be hashed without truncation.

        Parameters
        ----------
        password
            The password to validate

        Raises
        ------
        WeakPasswordError
            If password is empty or exceeds bcrypt's input limit
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash needs to be rehashed.

        This is useful when upgrading the work factor. After changing
        the rounds setting, existing hashes can be identified for
        rehashing on next login.

        Parameters
        ----------
        password_hash
            The existing hash to check

        Returns
        -------
        True if the hash should be regenerated
        """
        try:
            # Extract rounds from hash (bcrypt format: $2b$XX$...)
            parts = password_hash.split("$")
            if len(parts) >= 3:
                current_rounds = int(parts[2])
                return current_rounds != self._rounds
        except (ValueError, IndexError):
            pass
        return True
