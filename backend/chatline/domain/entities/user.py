"""
User Entity - A directory entry for a registered user.

Users are created by the identity provider; the messaging core only reads them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId


@dataclass
class User:
    id: UserId
    name: str
    # Optional fields (with defaults) - must come last
    email: Optional[str] = None
    avatar_ref: Optional[MediaRef] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError(f"User {self.id} must have a display name")

    def matches(self, text: str) -> bool:
        """Case-insensitive substring match on the display name."""
        return text.casefold() in self.name.casefold()
