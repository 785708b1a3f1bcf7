"""
Conversation Store Port - durable, ordered log of messages per conversation.
Implementations:
- chatline/infrastructure/persistence/prisma_conversation_store.py
- chatline/infrastructure/persistence/memory_conversation_store.py
- chatline/infrastructure/cache/cached_conversation_store.py (Redis decorator)

Ordering contract:
- append() assigns created_at >= created_at of the previous message in the
  same conversation, and a strictly increasing id (insertion sequence).
- fetch_history() returns messages ascending by (created_at, id).
- Appends into one conversation are atomic with respect to each other;
  different conversations never serialise against each other.

The store does no access control: callers verify the requester is one of the
two participants before asking for history.
"""

from abc import ABC, abstractmethod
from typing import Optional

from chatline.domain.entities.message import Message
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId


class ConversationStore(ABC):
    @abstractmethod
    async def append(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str] = None,
        media_ref: Optional[MediaRef] = None,
    ) -> Message: ...

    @abstractmethod
    async def fetch_history(self, conversation_key: ConversationKey) -> list[Message]: ...

    @abstractmethod
    async def list_counterpart_ids(self, user_id: UserId) -> list[UserId]: ...
