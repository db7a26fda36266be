"""Authentication exceptions.

These exceptions are raised by the veris_auth package and should be
caught and translated by the application layer (AuthenticationService).
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a JWT token is invalid, expired, or malformed."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class WeakPasswordError(AuthError):
    """Raised when a password cannot be hashed safely."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)
