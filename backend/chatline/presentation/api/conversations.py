"""
Conversations API Router - conversation list and history.

Endpoints:
- GET /conversations - counterpart users the caller has exchanged messages with
- GET /conversations/{conversation_key}/messages - full ordered history

Flow:
  HTTP Request → Router → Query → Handler → ConversationStore / UserRepository
                                 ↓
  HTTP Response ← Router ← DTOs ←

History is how clients catch up after a reconnect: live delivery is best
effort, the store is the source of truth.
"""

from logging import getLogger

from fastapi import APIRouter, Depends, HTTPException, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from chatline.application.dto.chat import MessageDTO
from chatline.application.dto.user import UserDTO
from chatline.application.queries.chat import GetChatHistoryQuery, GetChatHistoryHandler
from chatline.application.queries.conversations import (
    ListConversationsQuery,
    ListConversationsHandler,
)
from chatline.domain.exceptions import (
    AccessDeniedError,
    EntityNotFoundError,
    StoreUnavailableError,
)
from chatline.domain.value_objects.conversation_key import ConversationKey
from chatline.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== RESPONSE MODELS ====================


class ListConversationsResponse(BaseModel):
    """
    {
        "users": [{"id": 7, "name": "Linus", "profile_pic": null}, ...]
    }
    """

    users: list[UserDTO]


class ChatHistoryResponse(BaseModel):
    chat_id: str
    messages: list[MessageDTO]


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


# ==================== ENDPOINTS ====================


@router.get("", response_model=ListConversationsResponse)
@inject
async def list_conversations(
    handler: FromDishka[ListConversationsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """List every user the caller has a conversation with."""
    try:
        users = await handler.execute(ListConversationsQuery(user_id=current_user.id))
    except StoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e

    return ListConversationsResponse(users=[UserDTO.from_entity(u) for u in users])


@router.get("/{conversation_key}/messages", response_model=ChatHistoryResponse)
@inject
async def get_chat_history(
    conversation_key: str,
    handler: FromDishka[GetChatHistoryHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Full history of one conversation, ascending by (timestamp, id).

    - 400 if the key is not a canonical "<low>_<high>" pair
    - 403 if the caller is not one of the two participants
    - 404 if either participant does not exist
    """
    try:
        key = ConversationKey(conversation_key)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    try:
        messages = await handler.execute(
            GetChatHistoryQuery(conversation_key=key, requester_id=current_user.id)
        )
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreUnavailableError as e:
        logger.warning(f"History for {key} unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e

    return ChatHistoryResponse(
        chat_id=key.value,
        messages=[MessageDTO.from_entity(m) for m in messages],
    )
