from enum import Enum


class Role(str, Enum):
    """Roles an identity may hold (one identity may hold several)."""

    USER = "user"
    ADMIN = "admin"
