"""
In-memory identity directory.

Optionally seeded from a JSON file (Config.USER_DIRECTORY_FILE):

    [
        {"id": 3, "name": "Ada", "email": "ada@example.com", "profile_pic": "ada.png"},
        {"id": 7, "name": "Linus"}
    ]
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from chatline.domain.entities.user import User
from chatline.domain.ports.repositories.user_repository import UserRepository
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId

logger = logging.getLogger(__name__)


class MemoryUserRepository(UserRepository):
    def __init__(self, users: Iterable[User] = ()):
        self._users: dict[UserId, User] = {user.id: user for user in users}

    @classmethod
    def from_file(cls, path: str) -> "MemoryUserRepository":
        file = Path(path)
        if not file.exists():
            logger.warning(f"User directory file {path} not found, starting empty")
            return cls()

        records = json.loads(file.read_text(encoding="utf-8"))
        users = [
            User(
                id=UserId(int(record["id"])),
                name=record["name"],
                email=record.get("email"),
                avatar_ref=MediaRef(record["profile_pic"]) if record.get("profile_pic") else None,
            )
            for record in records
        ]
        logger.info(f"Loaded {len(users)} users from {path}")
        return cls(users)

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        return self._users.get(user_id)

    async def get_many(self, user_ids: Iterable[UserId]) -> list[User]:
        return [self._users[uid] for uid in sorted(set(user_ids)) if uid in self._users]

    async def search(
        self, text: str, exclude_id: Optional[UserId] = None, limit: int = 20
    ) -> list[User]:
        matches = [
            user
            for uid, user in sorted(self._users.items())
            if uid != exclude_id and user.matches(text)
        ]
        return matches[:limit]

    async def save(self, user: User) -> None:
        self._users[user.id] = user
