"""
Cached Conversation Store - Decorator pattern for Redis caching.

Architecture:
    CachedConversationStore (decorator)
        ↓ wraps
    PrismaConversationStore (concrete implementation)
        ↓ implements
    ConversationStore (abstract interface)

Cache Strategy:
- Read-Through: fetch_history checks Redis first, falls back to the store, populates Redis
- Write-Through + invalidate: append writes to the store first, bumps the
  conversation's version, then deletes the cached history
- Guarded fill: a read remembers the version before querying the store and
  only populates Redis if the version is still the same, so a snapshot taken
  before a concurrent append is never cached
- TTL-based expiration as a safety net (Config.REDIS_CACHE_TTL)

Redis Data Structure:
- "chat:{conversation_key}:msgs" - STRING holding a JSON array of messages, oldest first
- "chat:{conversation_key}:ver"  - INTEGER bumped on every append

Error Handling:
- Cache failures never fail the operation; they are logged and the inner
  store answers instead.
"""

import json
import logging
from datetime import datetime
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from chatline.config.settings import Config
from chatline.domain.entities.message import Message
from chatline.domain.ports.repositories.conversation_store import ConversationStore
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)

# KEYS[1] = history key, KEYS[2] = version key
# ARGV[1] = version seen before the store read ("" if none), ARGV[2] = ttl, ARGV[3] = payload
_FILL_IF_UNCHANGED = """
if (redis.call("GET", KEYS[2]) or "") == ARGV[1] then
    redis.call("SETEX", KEYS[1], ARGV[2], ARGV[3])
    return 1
end
return 0
"""


class CachedConversationStore(ConversationStore):
    """
    Decorator: adds Redis caching to ConversationStore.

    Implements the same interface, so callers don't know caching exists.
    """

    def __init__(
        self, store: ConversationStore, redis: Redis, ttl: int = Config.REDIS_CACHE_TTL
    ):
        self._store = store
        self._redis = redis
        self._ttl = ttl

    def _cache_key(self, conversation_key: ConversationKey) -> str:
        return f"chat:{conversation_key.value}:msgs"

    def _version_key(self, conversation_key: ConversationKey) -> str:
        return f"chat:{conversation_key.value}:ver"

    def _serialize_messages(self, messages: list[Message]) -> str:
        return json.dumps(
            [
                {
                    "id": m.id.value,
                    "conversation_key": m.conversation_key.value,
                    "sender_id": m.sender_id.value,
                    "receiver_id": m.receiver_id.value,
                    "content": m.content,
                    "media_ref": m.media_ref.value if m.media_ref else None,
                    "created_at": m.created_at.isoformat(),
                }
                for m in messages
            ]
        )

    def _deserialize_messages(self, json_str: str) -> list[Message]:
        return [
            Message(
                id=MessageId(item["id"]),
                conversation_key=ConversationKey(item["conversation_key"]),
                sender_id=UserId(item["sender_id"]),
                receiver_id=UserId(item["receiver_id"]),
                content=item.get("content"),
                media_ref=MediaRef(item["media_ref"]) if item.get("media_ref") else None,
                created_at=datetime.fromisoformat(item["created_at"]),
            )
            for item in json.loads(json_str)
        ]

    async def append(
        self,
        conversation_key: ConversationKey,
        sender_id: UserId,
        receiver_id: UserId,
        content: Optional[str] = None,
        media_ref: Optional[MediaRef] = None,
    ) -> Message:
        # Source of truth first; a failure here must not touch the cache.
        message = await self._store.append(
            conversation_key, sender_id, receiver_id, content, media_ref
        )
        version_key = self._version_key(conversation_key)
        try:
            # Bump before delete: a read that started earlier will not fill.
            await self._redis.incr(version_key)
            await self._redis.expire(version_key, self._ttl)
            await self._redis.delete(self._cache_key(conversation_key))
        except RedisError as e:
            logger.warning(f"[Cache] Failed to invalidate {conversation_key}: {e}")
        return message

    async def fetch_history(self, conversation_key: ConversationKey) -> list[Message]:
        key = self._cache_key(conversation_key)
        version_key = self._version_key(conversation_key)
        version: Optional[str] = None
        try:
            # Must be read before the store query below.
            version = await self._redis.get(version_key) or ""
            cached = await self._redis.get(key)
            if cached:
                logger.debug(f"[Cache] Hit for {conversation_key}")
                return self._deserialize_messages(cached)
        except (RedisError, ValueError, KeyError) as e:
            logger.warning(f"[Cache] Read failed for {conversation_key}: {e}")

        messages = await self._store.fetch_history(conversation_key)
        if version is None:
            return messages

        try:
            filled = await self._redis.eval(
                _FILL_IF_UNCHANGED,
                2,
                key,
                version_key,
                version,
                self._ttl,
                self._serialize_messages(messages),
            )
            if not filled:
                logger.debug(f"[Cache] {conversation_key} changed during read, not cached")
        except RedisError as e:
            logger.warning(f"[Cache] Failed to populate {conversation_key}: {e}")
        return messages

    async def list_counterpart_ids(self, user_id: UserId) -> list[UserId]:
        return await self._store.list_counterpart_ids(user_id)
