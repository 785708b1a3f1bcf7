"""
Persistence Layer - Conversation store and identity directory implementations.

The Prisma implementations import the generated Prisma client and are loaded
only by the Prisma provider (chatline/setup/ioc/prisma_provider.py).
"""

from chatline.infrastructure.persistence.keyed_locks import KeyedLocks
from chatline.infrastructure.persistence.memory_conversation_store import (
    MemoryConversationStore,
)
from chatline.infrastructure.persistence.memory_user_repository import (
    MemoryUserRepository,
)

__all__ = [
    "KeyedLocks",
    "MemoryConversationStore",
    "MemoryUserRepository",
]
