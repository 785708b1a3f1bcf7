"""
Messages API Router - submit a message without a live connection.

POST /messages runs the same SubmitMessageHandler the WebSocket gateway uses,
so the recipient still gets a live Deliver frame if online. There is no
origin connection; the response body is the acknowledgement.

Request:  {"receiver_id": 7, "content": "hi", "media_ref": null}
Response: 201 MessageDTO
"""

from logging import getLogger
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from chatline.application.commands.chat import SubmitMessageCommand, SubmitMessageHandler
from chatline.application.dto.chat import MessageDTO
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    StoreUnavailableError,
)
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId
from chatline.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


class SendMessageRequest(BaseModel):
    receiver_id: int
    content: Optional[str] = None
    media_ref: Optional[str] = None


router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageDTO, status_code=status.HTTP_201_CREATED)
@inject
async def send_message(
    request: SendMessageRequest,
    handler: FromDishka[SubmitMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    try:
        command = SubmitMessageCommand(
            sender_id=current_user.id,
            receiver_id=UserId(request.receiver_id),
            content=request.content,
            media_ref=MediaRef(request.media_ref) if request.media_ref else None,
        )
        message = await handler.execute(command)
    except (DomainValidationError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreUnavailableError as e:
        logger.error(f"Message from user {current_user.id} not persisted: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)
        ) from e

    return MessageDTO.from_entity(message)
