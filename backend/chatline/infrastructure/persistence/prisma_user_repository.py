"""
Prisma User Repository Implementation (identity directory).

Reads the users table owned by the identity provider. The password column is
never mapped into the domain. Calls are bounded like the conversation store,
so a stalled database surfaces as StoreUnavailableError.
"""

from typing import TYPE_CHECKING, Awaitable, Iterable, Optional, TypeVar

from chatline.config.settings import Config
from chatline.domain.entities.user import User
from chatline.domain.ports.repositories.user_repository import UserRepository
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.persistence.bounded import bounded

if TYPE_CHECKING:
    from prisma import Prisma
    from prisma.models import User as PrismaUser

T = TypeVar("T")


class PrismaUserRepository(UserRepository):
    _prisma: "Prisma"

    def __init__(self, prisma: "Prisma", timeout: float = Config.STORE_TIMEOUT_SECONDS):
        self._prisma = prisma
        self._timeout = timeout

    def _to_entity(self, record: "PrismaUser") -> User:
        """Map Prisma record to domain entity."""
        return User(
            id=UserId(record.id),
            name=record.name,
            email=record.email,
            avatar_ref=MediaRef(record.profile_pic) if record.profile_pic else None,
            created_at=record.created_at,
        )

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        return await bounded(f"users.{operation}", awaitable, self._timeout)

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        record = await self._bounded(
            "get_by_id", self._prisma.user.find_unique(where={"id": user_id.value})
        )
        return self._to_entity(record) if record else None

    async def get_many(self, user_ids: Iterable[UserId]) -> list[User]:
        ids = sorted({uid.value for uid in user_ids})
        if not ids:
            return []
        records = await self._bounded(
            "get_many",
            self._prisma.user.find_many(
                where={"id": {"in": ids}},
                order={"id": "asc"},
            ),
        )
        return [self._to_entity(record) for record in records]

    async def search(
        self, text: str, exclude_id: Optional[UserId] = None, limit: int = 20
    ) -> list[User]:
        where: dict = {"name": {"contains": text, "mode": "insensitive"}}
        if exclude_id is not None:
            where["NOT"] = [{"id": exclude_id.value}]
        records = await self._bounded(
            "search",
            self._prisma.user.find_many(
                where=where,
                order={"id": "asc"},
                take=limit,
            ),
        )
        return [self._to_entity(record) for record in records]

    async def save(self, user: User) -> None:
        """Update profile fields. Creating users belongs to the identity provider."""
        await self._bounded(
            "save",
            self._prisma.user.update(
                where={"id": user.id.value},
                data={
                    "name": user.name,
                    "profile_pic": user.avatar_ref.value if user.avatar_ref else None,
                },
            ),
        )
