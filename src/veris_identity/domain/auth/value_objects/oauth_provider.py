from enum import Enum


class OAuthProvider(str, Enum):
    """External identity providers an identity can be linked to."""

    GOOGLE = "google"
    APPLE = "apple"

    @property
    def placeholder_name(self) -> str:
        """First name used for the profile when the provider sends none."""
        return f"{self.value.capitalize()} User"
