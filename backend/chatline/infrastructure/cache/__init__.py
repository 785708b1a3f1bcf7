"""
Cache Layer - Redis caching implementations.

Contains async Redis client factory and the cached conversation store decorator.
"""

from chatline.infrastructure.cache.redis_client import create_redis_client, close_redis_client
from chatline.infrastructure.cache.cached_conversation_store import CachedConversationStore

__all__ = [
    "create_redis_client",
    "close_redis_client",
    "CachedConversationStore",
]
