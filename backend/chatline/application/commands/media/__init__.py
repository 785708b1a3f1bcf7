"""Media commands."""

from chatline.application.commands.media.upload_media import (
    UploadMediaCommand,
    UploadMediaHandler,
)

__all__ = [
    "UploadMediaCommand",
    "UploadMediaHandler",
]
