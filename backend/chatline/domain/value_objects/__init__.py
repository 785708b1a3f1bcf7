"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
"""

from chatline.domain.value_objects.user_id import UserId
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.media_ref import MediaRef

__all__ = [
    "UserId",
    "ConversationKey",
    "MessageId",
    "MediaRef",
]
