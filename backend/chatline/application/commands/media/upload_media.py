"""
Upload Media Command - store an image or video, return its media reference.

The reference is what a client then puts into a submit frame (media_ref).
"""

from dataclasses import dataclass

from chatline.application.common.interfaces import Command, CommandHandler
from chatline.config.settings import Config
from chatline.domain.exceptions.payload_too_large import PayloadTooLargeError
from chatline.domain.exceptions.validation_error import DomainValidationError
from chatline.domain.ports.blob_store import BlobStore
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class UploadMediaCommand(Command[MediaRef]):
    uploader_id: UserId
    content: bytes
    mime_type: str


class UploadMediaHandler(CommandHandler[MediaRef]):
    def __init__(
        self,
        blob_store: BlobStore,
        allowed_prefixes: tuple[str, ...] = tuple(Config.MEDIA_MIME_PREFIXES),
        max_bytes: int = int(Config.MAX_UPLOAD_MB * 1024 * 1024),
    ):
        self._blob_store = blob_store
        self._allowed_prefixes = allowed_prefixes
        self._max_bytes = max_bytes

    async def execute(self, command: UploadMediaCommand) -> MediaRef:
        if not command.content:
            raise DomainValidationError("Uploaded file is empty")
        if len(command.content) > self._max_bytes:
            raise PayloadTooLargeError(
                f"File too large. Maximum upload size is {self._max_bytes // 1024} KB."
            )
        if not command.mime_type.startswith(self._allowed_prefixes):
            raise DomainValidationError("Only images and videos are allowed!")
        return self._blob_store.store(command.content, command.mime_type)
