"""Chat DTOs for API and WebSocket payloads."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from chatline.domain.entities.message import Message


class MessageDTO(BaseModel):
    """
    A persisted message as seen by clients.

    Field names follow the messages table so existing clients keep working:
    {
        "id": 42,
        "chat_id": "3_7",
        "sender_id": 7,
        "receiver_id": 3,
        "content": "hi",
        "file_path": null,
        "timestamp": "2025-01-27T12:00:00+00:00"
    }
    """

    id: int
    chat_id: str
    sender_id: int
    receiver_id: int
    content: Optional[str] = None
    file_path: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        return cls(
            id=message.id.value,
            chat_id=message.conversation_key.value,
            sender_id=message.sender_id.value,
            receiver_id=message.receiver_id.value,
            content=message.content,
            file_path=message.media_ref.value if message.media_ref else None,
            timestamp=message.created_at,
        )
