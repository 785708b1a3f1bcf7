"""
User Repository Port - the identity directory (profiles and search).
Implementations:
- chatline/infrastructure/persistence/prisma_user_repository.py
- chatline/infrastructure/persistence/memory_user_repository.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from chatline.domain.entities.user import User
from chatline.domain.value_objects.user_id import UserId


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]: ...

    @abstractmethod
    async def get_many(self, user_ids: Iterable[UserId]) -> list[User]: ...

    @abstractmethod
    async def search(
        self, text: str, exclude_id: Optional[UserId] = None, limit: int = 20
    ) -> list[User]: ...

    @abstractmethod
    async def save(self, user: User) -> None: ...
