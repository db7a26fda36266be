from enum import Enum


class Platform(str, Enum):
    """Mobile platforms a provider client id can be configured for."""

    IOS = "ios"
    ANDROID = "android"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(p.value for p in cls)
