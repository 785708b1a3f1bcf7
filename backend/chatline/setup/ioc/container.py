"""
Dishka DI Container Setup.

- Maps abstract ports to concrete implementations
- Manages lifecycle: Scope.APP = one per container (registry, stores, identity
  provider), Scope.REQUEST = one per HTTP request or WebSocket submission
  (handlers)

Providers:
- AppProvider: everything that does not depend on the storage backend
- MemoryStoreProvider: in-process ConversationStore / UserRepository
- PrismaStoreProvider (prisma_provider.py): PostgreSQL, optionally Redis-cached.
  Imported only when selected, because the generated Prisma client must exist.

Flow:
  Container → provides → ConversationStore (APP) → to → SubmitMessageHandler (REQUEST)
                                 ↓
                 shared KeyedLocks serialise appends per conversation
"""

from typing import Type

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from chatline.application.commands.chat import RetryPolicy, SubmitMessageHandler
from chatline.application.commands.media import UploadMediaHandler
from chatline.application.commands.users import UpdateProfileHandler
from chatline.application.queries.chat import GetChatHistoryHandler
from chatline.application.queries.conversations import ListConversationsHandler
from chatline.application.queries.users import GetUserHandler, SearchUsersHandler
from chatline.config.settings import Config
from chatline.domain.ports.blob_store import BlobStore
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.domain.ports.repositories import ConversationStore, UserRepository
from chatline.infrastructure.identity import JwtIdentityProvider
from chatline.infrastructure.persistence import (
    MemoryConversationStore,
    MemoryUserRepository,
)
from chatline.infrastructure.realtime import ConnectionRegistry
from chatline.infrastructure.storage import DiskBlobStore


class AppProvider(Provider):
    """Backend-independent dependencies. Storage ports come from a store provider."""

    def __init__(self, config: Type[Config] = Config):
        super().__init__()
        self.config = config

    # ==================== REALTIME ====================

    @provide(scope=Scope.APP)
    def get_connection_registry(self) -> ConnectionRegistry:
        """
        One registry per container: every connection and every handler must
        see the same user_id → connection map.
        """
        return ConnectionRegistry(shards=self.config.REGISTRY_SHARDS)

    # ==================== IDENTITY / MEDIA ====================

    @provide(scope=Scope.APP)
    def get_identity_provider(self) -> IdentityProvider:
        return JwtIdentityProvider(
            secret=self.config.JWT_SECRET,
            algorithm=self.config.JWT_ALGORITHM,
        )

    @provide(scope=Scope.APP)
    def get_blob_store(self) -> BlobStore:
        return DiskBlobStore(self.config.MEDIA_BASE)

    @provide(scope=Scope.APP)
    def get_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            attempts=self.config.STORE_RETRY_ATTEMPTS,
            base_delay=self.config.STORE_RETRY_BASE_DELAY,
            max_delay=self.config.STORE_RETRY_MAX_DELAY,
        )

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_submit_message_handler(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
        registry: ConnectionRegistry,
        retry_policy: RetryPolicy,
    ) -> SubmitMessageHandler:
        """
        Provide SubmitMessageHandler (the message router).

        Used by both the WebSocket gateway and POST /messages.
        """
        return SubmitMessageHandler(
            conversation_store, user_repository, registry, retry_policy
        )

    @provide(scope=Scope.REQUEST)
    def get_chat_history_handler(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
    ) -> GetChatHistoryHandler:
        return GetChatHistoryHandler(conversation_store, user_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_handler(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
    ) -> ListConversationsHandler:
        return ListConversationsHandler(conversation_store, user_repository)

    @provide(scope=Scope.REQUEST)
    def get_user_handler(self, user_repository: UserRepository) -> GetUserHandler:
        return GetUserHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_search_users_handler(
        self, user_repository: UserRepository
    ) -> SearchUsersHandler:
        return SearchUsersHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_update_profile_handler(
        self, user_repository: UserRepository
    ) -> UpdateProfileHandler:
        return UpdateProfileHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_upload_media_handler(self, blob_store: BlobStore) -> UploadMediaHandler:
        return UploadMediaHandler(
            blob_store,
            allowed_prefixes=tuple(self.config.MEDIA_MIME_PREFIXES),
            max_bytes=int(self.config.MAX_UPLOAD_MB * 1024 * 1024),
        )


class MemoryStoreProvider(Provider):
    """In-process storage for development and tests (STORE_BACKEND=memory)."""

    def __init__(self, config: Type[Config] = Config):
        super().__init__()
        self.config = config

    @provide(scope=Scope.APP)
    def get_conversation_store(self) -> ConversationStore:
        return MemoryConversationStore()

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        if self.config.USER_DIRECTORY_FILE:
            return MemoryUserRepository.from_file(self.config.USER_DIRECTORY_FILE)
        return MemoryUserRepository()


def store_provider(config: Type[Config]) -> Provider:
    if config.STORE_BACKEND == "memory":
        return MemoryStoreProvider(config)
    if config.STORE_BACKEND == "prisma":
        from chatline.setup.ioc.prisma_provider import PrismaStoreProvider

        return PrismaStoreProvider(config)
    raise ValueError(f"Unknown STORE_BACKEND: {config.STORE_BACKEND!r}")


def create_container(config: Type[Config] = Config, *providers: Provider) -> AsyncContainer:
    """
    Create and configure the DI container.

    - Extra providers are appended last, so tests can override bindings
    - Call this ONCE per application instance
    """
    return make_async_container(AppProvider(config), store_provider(config), *providers)
