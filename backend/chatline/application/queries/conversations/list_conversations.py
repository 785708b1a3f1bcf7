"""List Conversations Query - every user the requester has exchanged messages with."""

from dataclasses import dataclass

from chatline.application.common.interfaces import Query, QueryHandler
from chatline.domain.entities.user import User
from chatline.domain.ports.repositories import ConversationStore, UserRepository
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class ListConversationsQuery(Query[list[User]]):
    user_id: UserId


class ListConversationsHandler(QueryHandler[list[User]]):
    def __init__(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
    ):
        self._store = conversation_store
        self._users = user_repository

    async def execute(self, query: ListConversationsQuery) -> list[User]:
        counterpart_ids = await self._store.list_counterpart_ids(query.user_id)
        return await self._users.get_many(counterpart_ids)
