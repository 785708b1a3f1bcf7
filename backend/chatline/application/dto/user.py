"""User DTOs for API responses."""

from typing import Optional

from pydantic import BaseModel

from chatline.domain.entities.user import User


class UserDTO(BaseModel):
    id: int
    name: str
    profile_pic: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id.value,
            name=user.name,
            profile_pic=user.avatar_ref.value if user.avatar_ref else None,
        )


class CurrentUserDTO(UserDTO):
    email: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "CurrentUserDTO":
        return cls(
            id=user.id.value,
            name=user.name,
            email=user.email,
            profile_pic=user.avatar_ref.value if user.avatar_ref else None,
        )
