"""Domain events exchanged between command handlers and the registration saga.

Events are transient: they live on the event bus between publish and
delivery and are never queried afterwards.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthIdentityCreated:
    """Emitted once an AuthIdentity has been durably stored."""

    auth_id: str
    profile_id: str
    first_name: str = ""
    last_name: str = ""
    age: int = 0


@dataclass(frozen=True)
class ProfileCreationFailed:
    """Emitted when the profile for a freshly created identity could not be stored."""

    auth_id: str
    profile_id: str
    error: str = ""
