"""
Message Entity - A single message exchanged between two users.

Messages are immutable once persisted: there is no edit or delete.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Message:
    id: MessageId
    conversation_key: ConversationKey
    sender_id: UserId
    receiver_id: UserId
    created_at: datetime
    content: Optional[str] = None
    media_ref: Optional[MediaRef] = None

    def __post_init__(self):
        if not self.content and self.media_ref is None:
            raise ValueError("Message needs text content or a media reference")
        if ConversationKey.of(self.sender_id, self.receiver_id) != self.conversation_key:
            raise ValueError(
                f"Conversation key {self.conversation_key} does not match "
                f"participants {self.sender_id}/{self.receiver_id}"
            )

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """History order: server timestamp, then insertion sequence."""
        return self.created_at, self.id.value
