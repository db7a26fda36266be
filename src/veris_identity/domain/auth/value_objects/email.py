"""Email value object.

Provides validated, normalized email addresses for identity lookup.
"""

import re
from dataclasses import dataclass

from veris_identity.exceptions import ValidationError

# Simple but effective email regex: something@something.tld, no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Email cannot be empty"
            raise ValidationError(msg, code="invalid_email")

        normalized = self.value.lower().strip()

        if not EMAIL_PATTERN.fullmatch(normalized):
            msg = "Invalid email format"
            raise ValidationError(msg, code="invalid_email")

        # Replace value with normalized version (frozen dataclass workaround)
        object.__setattr__(self, "value", normalized)

    @staticmethod
    def is_valid(value: str | None) -> bool:
        return bool(value) and EMAIL_PATTERN.fullmatch(value.strip()) is not None

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
