"""User profile commands."""

from chatline.application.commands.users.update_profile import (
    UpdateProfileCommand,
    UpdateProfileHandler,
)

__all__ = [
    "UpdateProfileCommand",
    "UpdateProfileHandler",
]
