"""
Users API Router - identity directory lookups and profile updates.

Endpoints:
- GET /users/me - caller's own profile (includes email)
- PATCH /users/me - change display name and/or avatar
- GET /users/search?query= - find users by display name, caller excluded
- GET /users/{user_id} - public profile
"""

from logging import getLogger
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from chatline.application.commands.users import UpdateProfileCommand, UpdateProfileHandler
from chatline.application.dto.user import CurrentUserDTO, UserDTO
from chatline.application.queries.users import (
    GetUserQuery,
    GetUserHandler,
    SearchUsersQuery,
    SearchUsersHandler,
)
from chatline.config.settings import Config
from chatline.domain.exceptions import DomainValidationError, EntityNotFoundError
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId
from chatline.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


class UpdateProfileRequest(BaseModel):
    """Either field may be omitted, not both."""

    name: Optional[str] = None
    profile_pic: Optional[str] = None


class SearchUsersResponse(BaseModel):
    users: list[UserDTO]


router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=CurrentUserDTO)
@inject
async def get_me(
    handler: FromDishka[GetUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    try:
        user = await handler.execute(GetUserQuery(user_id=current_user.id))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return CurrentUserDTO.from_entity(user)


@router.patch("/me", response_model=CurrentUserDTO)
@inject
async def update_me(
    request: UpdateProfileRequest,
    handler: FromDishka[UpdateProfileHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Update the caller's profile.

    profile_pic is a media_ref previously returned by POST /media.
    """
    try:
        command = UpdateProfileCommand(
            user_id=current_user.id,
            name=request.name,
            avatar_ref=MediaRef(request.profile_pic) if request.profile_pic else None,
        )
        user = await handler.execute(command)
    except (DomainValidationError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    logger.info(f"User {current_user.id} updated profile")
    return CurrentUserDTO.from_entity(user)


@router.get("/search", response_model=SearchUsersResponse)
@inject
async def search_users(
    handler: FromDishka[SearchUsersHandler],
    query: str = Query(default=""),
    current_user: AuthUser = Depends(get_current_user),
):
    try:
        users = await handler.execute(
            SearchUsersQuery(
                text=query,
                requester_id=current_user.id,
                limit=Config.USER_SEARCH_LIMIT,
            )
        )
    except DomainValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return SearchUsersResponse(users=[UserDTO.from_entity(u) for u in users])


@router.get("/{user_id}", response_model=UserDTO)
@inject
async def get_user(
    user_id: str,
    handler: FromDishka[GetUserHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    try:
        user = await handler.execute(GetUserQuery(user_id=UserId.parse(user_id)))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return UserDTO.from_entity(user)
