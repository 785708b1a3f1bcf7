"""
In-memory Conversation Store.

Used with STORE_BACKEND=memory (local development, tests). Holds every message
of the process in a dict keyed by conversation key; nothing survives a restart.
"""

import itertools
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from chatline.domain.entities.message import Message
from chatline.domain.ports.repositories.conversation_store import ConversationStore
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.persistence.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryConversationStore(ConversationStore):
    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._sequence = itertools.count(1)
        self._conversations: dict[ConversationKey, list[Message]] = {}
        self._locks = KeyedLocks()

    async def append(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str] = None,
        media_ref: Optional[MediaRef] = None,
    ) -> Message:
        async with self._locks.hold(conversation_key):
            log = self._conversations.setdefault(conversation_key, [])
            created_at = self._clock()
            if log and log[-1].created_at > created_at:
                # Clock went backwards; keep the conversation non-decreasing.
                created_at = log[-1].created_at

            message = Message(
                id=MessageId(next(self._sequence)),
                conversation_key=conversation_key,
                sender_id=sender_id,
                receiver_id=receiver_id,
                created_at=created_at,
                content=content,
                media_ref=media_ref,
            )
            log.append(message)

        logger.debug(f"Appended message {message.id} to {conversation_key}")
        return message

    async def fetch_history(self, conversation_key: ConversationKey) -> list[Message]:
        return sorted(
            self._conversations.get(conversation_key, []), key=lambda m: m.sort_key
        )

    async def list_counterpart_ids(self, user_id: UserId) -> list[UserId]:
        return sorted(
            key.counterpart_of(user_id)
            for key, log in self._conversations.items()
            if log and key.includes(user_id)
        )
