"""
Media API Router - attachments for messages and avatars.

Endpoints:
- POST /media - upload an image or video (multipart/form-data, field "file")
- GET /media/{media_ref} - download a stored file

The returned media_ref goes into a submit frame or POST /messages body; the
message itself only ever carries the reference.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel

from chatline.application.commands.media import UploadMediaCommand, UploadMediaHandler
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PayloadTooLargeError,
)
from chatline.domain.ports.blob_store import BlobStore
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.presentation.dependencies.auth import AuthUser, get_current_user

logger = logging.getLogger(__name__)


class UploadMediaResponse(BaseModel):
    media_ref: str
    msg: str


router = APIRouter(prefix="/media", tags=["media"])


@router.post("", response_model=UploadMediaResponse, status_code=status.HTTP_201_CREATED)
@inject
async def upload_media(
    handler: FromDishka[UploadMediaHandler],
    current_user: AuthUser = Depends(get_current_user),
    file: UploadFile = File(...),
):
    """Max file size: Config.MAX_UPLOAD_MB. Only image/* and video/* are accepted."""
    content = await file.read()
    command = UploadMediaCommand(
        uploader_id=current_user.id,
        content=content,
        mime_type=file.content_type or "",
    )
    try:
        ref = await handler.execute(command)
    except PayloadTooLargeError as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e)
        ) from e
    except DomainValidationError as e:
        logger.warning(f"Upload rejected for user {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except OSError as e:
        logger.error(f"Upload error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from e

    return UploadMediaResponse(media_ref=ref.value, msg="File uploaded successfully")


@router.get("/{media_ref}")
@inject
async def get_media(
    media_ref: str,
    blob_store: FromDishka[BlobStore],
    current_user: AuthUser = Depends(get_current_user),
):
    try:
        path = blob_store.resolve(MediaRef(media_ref))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return FileResponse(path)
