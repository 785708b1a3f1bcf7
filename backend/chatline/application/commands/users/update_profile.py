"""Update Profile Command - change display name and/or avatar."""

from dataclasses import dataclass
from typing import Optional

from chatline.application.common.interfaces import Command, CommandHandler
from chatline.domain.entities.user import User
from chatline.domain.exceptions import DomainValidationError, EntityNotFoundError
from chatline.domain.ports.repositories import UserRepository
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class UpdateProfileCommand(Command[User]):
    user_id: UserId
    name: Optional[str] = None
    avatar_ref: Optional[MediaRef] = None


class UpdateProfileHandler(CommandHandler[User]):
    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, command: UpdateProfileCommand) -> User:
        name = command.name.strip() if command.name else None
        if not name and command.avatar_ref is None:
            raise DomainValidationError("No changes provided")

        user = await self._user_repository.get_by_id(command.user_id)
        if not user:
            raise EntityNotFoundError(f"User {command.user_id} not found")

        if name:
            user.name = name
        if command.avatar_ref is not None:
            user.avatar_ref = command.avatar_ref
        await self._user_repository.save(user)
        return user
