"""Search Users Query - find counterparties by display name."""

from dataclasses import dataclass

from chatline.application.common.interfaces import Query, QueryHandler
from chatline.config.settings import Config
from chatline.domain.entities.user import User
from chatline.domain.exceptions import DomainValidationError
from chatline.domain.ports.repositories import UserRepository
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class SearchUsersQuery(Query[list[User]]):
    text: str
    requester_id: UserId
    limit: int = Config.USER_SEARCH_LIMIT


class SearchUsersHandler(QueryHandler[list[User]]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, query: SearchUsersQuery) -> list[User]:
        text = query.text.strip()
        if not text:
            raise DomainValidationError("Search query is required")
        return await self._user_repository.search(
            text, exclude_id=query.requester_id, limit=query.limit
        )
