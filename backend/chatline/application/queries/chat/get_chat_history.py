"""
GetChatHistory Query - full, ordered history of one conversation.

Used by clients on cold start and after reconnect to catch up on anything a
live delivery missed.

The conversation store does no access control, so it happens here:
1. Requester must be one of the two participants encoded in the key
2. Both participants must exist in the identity directory
3. Messages come back ascending by (timestamp, id); there is no pagination
"""

from dataclasses import dataclass

from chatline.application.common.interfaces import Query, QueryHandler
from chatline.domain.entities.message import Message
from chatline.domain.exceptions import AccessDeniedError, EntityNotFoundError
from chatline.domain.ports.repositories import ConversationStore, UserRepository
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class GetChatHistoryQuery(Query[list[Message]]):
    conversation_key: ConversationKey
    requester_id: UserId


class GetChatHistoryHandler(QueryHandler[list[Message]]):
    def __init__(
        self,
        conversation_store: ConversationStore,
        user_repository: UserRepository,
    ):
        self._store = conversation_store
        self._users = user_repository

    async def execute(self, query: GetChatHistoryQuery) -> list[Message]:
        """
        Raises:
            AccessDeniedError: If the requester is not a participant
            EntityNotFoundError: If either participant does not exist
        """
        if not query.conversation_key.includes(query.requester_id):
            raise AccessDeniedError("Unauthorized access to chat")

        participants = await self._users.get_many(query.conversation_key.participants)
        if len(participants) < 2:
            raise EntityNotFoundError("Invalid chat participants")

        return await self._store.fetch_history(query.conversation_key)
