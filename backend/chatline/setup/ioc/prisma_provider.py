"""
PostgreSQL storage via Prisma, with an optional Redis history cache.

Kept apart from container.py so the generated Prisma client is only imported
when STORE_BACKEND=prisma.
"""

import logging
from typing import AsyncIterable, Type

from dishka import Provider, Scope, provide
from prisma import Prisma

from chatline.config.settings import Config
from chatline.domain.ports.repositories import ConversationStore, UserRepository
from chatline.infrastructure.cache import (
    CachedConversationStore,
    close_redis_client,
    create_redis_client,
)
from chatline.infrastructure.persistence.prisma_conversation_store import (
    PrismaConversationStore,
)
from chatline.infrastructure.persistence.prisma_user_repository import (
    PrismaUserRepository,
)

logger = logging.getLogger(__name__)


class PrismaStoreProvider(Provider):
    def __init__(self, config: Type[Config] = Config):
        super().__init__()
        self.config = config

    @provide(scope=Scope.APP)
    async def get_prisma(self) -> AsyncIterable[Prisma]:
        """
        Provide Prisma client (singleton, app-scoped).

        - connected once, disconnected when the container closes
        """
        if self.config.DATABASE_URL:
            prisma = Prisma(datasource={"url": self.config.DATABASE_URL})
        else:
            prisma = Prisma()
        await prisma.connect()
        yield prisma
        await prisma.disconnect()

    @provide(scope=Scope.APP)
    async def get_conversation_store(self, prisma: Prisma) -> AsyncIterable[ConversationStore]:
        """
        App-scoped so every request shares the per-conversation append locks.

        With REDIS_CACHE_ENABLED the store is wrapped in the history cache.
        """
        store = PrismaConversationStore(prisma, timeout=self.config.STORE_TIMEOUT_SECONDS)
        if not self.config.REDIS_CACHE_ENABLED:
            yield store
            return

        redis = await create_redis_client(self.config.REDIS_URL)
        logger.info("Conversation history cache enabled")
        yield CachedConversationStore(store, redis, ttl=self.config.REDIS_CACHE_TTL)
        await close_redis_client(redis)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, prisma: Prisma) -> UserRepository:
        return PrismaUserRepository(prisma, timeout=self.config.STORE_TIMEOUT_SECONDS)
