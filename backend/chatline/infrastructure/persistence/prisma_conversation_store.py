"""
Prisma Conversation Store Implementation.

Prisma Message Model (backend/prisma/schema.prisma):
    model Message {
        id          Int      @id @default(autoincrement())
        chat_id     String
        sender_id   Int
        receiver_id Int
        content     String?
        file_path   String?
        timestamp   DateTime @default(now())
    }

Mapping:
- Prisma: id (int)         ←→ Domain: id (MessageId), also the insertion sequence
- Prisma: chat_id (str)    ←→ Domain: conversation_key (ConversationKey)
- Prisma: file_path (str?) ←→ Domain: media_ref (MediaRef)
- Prisma: timestamp        ←→ Domain: created_at

Ordering:
    append() runs under a per-conversation lock and inside a transaction: it
    reads the newest row of the conversation and stamps the new row with
    max(now, newest.timestamp). History is read ORDER BY timestamp, id.

Failure handling:
    Every call is bounded by Config.STORE_TIMEOUT_SECONDS. Timeouts and Prisma
    engine/connection errors surface as StoreUnavailableError (retryable).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Awaitable, Optional, TypeVar

from chatline.config.settings import Config
from chatline.domain.entities.message import Message
from chatline.domain.ports.repositories.conversation_store import ConversationStore
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.persistence.bounded import bounded
from chatline.infrastructure.persistence.keyed_locks import KeyedLocks

if TYPE_CHECKING:
    from prisma import Prisma
    from prisma.models import Message as PrismaMessage

T = TypeVar("T")

HISTORY_ORDER = [{"timestamp": "asc"}, {"id": "asc"}]


class PrismaConversationStore(ConversationStore):
    """
    Prisma implementation of ConversationStore.

    App-scoped: the per-conversation append locks must be shared by every request.
    """

    _prisma: "Prisma"

    def __init__(
        self,
        prisma: "Prisma",
        locks: Optional[KeyedLocks] = None,
        timeout: float = Config.STORE_TIMEOUT_SECONDS,
    ):
        self._prisma = prisma
        self._locks = locks or KeyedLocks()
        self._timeout = timeout

    def _to_entity(self, record: "PrismaMessage") -> Message:
        """Map Prisma record to domain entity."""
        return Message(
            id=MessageId(record.id),
            conversation_key=ConversationKey(record.chat_id),
            sender_id=UserId(record.sender_id),
            receiver_id=UserId(record.receiver_id),
            created_at=record.timestamp,
            content=record.content,
            media_ref=MediaRef(record.file_path) if record.file_path else None,
        )

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        return await bounded(operation, awaitable, self._timeout)

    async def append(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str] = None,
        media_ref: Optional[MediaRef] = None,
    ) -> Message:
        async with self._locks.hold(conversation_key):
            record = await self._bounded(
                "append",
                self._insert(conversation_key, sender_id, receiver_id, content, media_ref),
            )
        return self._to_entity(record)

    async def _insert(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str],
        media_ref: Optional[MediaRef],
    ) -> "PrismaMessage":
        async with self._prisma.tx() as tx:
            newest = await tx.message.find_first(
                where={"chat_id": conversation_key.value},
                order=[{"timestamp": "desc"}, {"id": "desc"}],
            )
            timestamp = datetime.now(timezone.utc)
            if newest and newest.timestamp > timestamp:
                timestamp = newest.timestamp

            return await tx.message.create(
                data={
                    "chat_id": conversation_key.value,
                    "sender_id": sender_id.value,
                    "receiver_id": receiver_id.value,
                    "content": content,
                    "file_path": media_ref.value if media_ref else None,
                    "timestamp": timestamp,
                }
            )

    async def fetch_history(self, conversation_key: ConversationKey) -> list[Message]:
        records = await self._bounded(
            "fetch_history",
            self._prisma.message.find_many(
                where={"chat_id": conversation_key.value},
                order=HISTORY_ORDER,
            ),
        )
        return [self._to_entity(record) for record in records]

    async def list_counterpart_ids(self, user_id: UserId) -> list[UserId]:
        records = await self._bounded(
            "list_counterparts",
            self._prisma.message.find_many(
                where={
                    "OR": [
                        {"sender_id": user_id.value},
                        {"receiver_id": user_id.value},
                    ]
                },
                distinct=["chat_id"],
            ),
        )
        return sorted(
            {ConversationKey(record.chat_id).counterpart_of(user_id) for record in records}
        )
