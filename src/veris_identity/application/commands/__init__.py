"""Commands and their handlers."""

from veris_identity.application.commands.create_auth_identity_command import (
    CreateAuthIdentityCommand,
    CreateAuthIdentityHandler,
)
from veris_identity.application.commands.create_profile_command import (
    CreateProfileCommand,
    CreateProfileHandler,
)
from veris_identity.application.commands.delete_auth_identity_command import (
    DeleteAuthIdentityCommand,
    DeleteAuthIdentityHandler,
)

__all__ = [
    "CreateAuthIdentityCommand",
    "CreateAuthIdentityHandler",
    "CreateProfileCommand",
    "CreateProfileHandler",
    "DeleteAuthIdentityCommand",
    "DeleteAuthIdentityHandler",
]
