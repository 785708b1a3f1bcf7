"""
DiskBlobStore - media files on the local file system.

This is a SYNC service - no database, no async. Files are written under
base_dir with a generated name; the name itself is the media reference
stored on messages.
"""

import logging
import mimetypes
import os
from pathlib import Path
from uuid import uuid4

from chatline.domain.exceptions.entity_not_found import EntityNotFoundError
from chatline.domain.ports.blob_store import BlobStore
from chatline.domain.value_objects.media_ref import MediaRef

logger = logging.getLogger(__name__)

# mimetypes picks odd defaults for a few common types
_PREFERRED_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "video/quicktime": ".mov",
}


class DiskBlobStore(BlobStore):
    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir).resolve()

    def _extension(self, mime_type: str) -> str:
        return _PREFERRED_EXTENSIONS.get(mime_type) or mimetypes.guess_extension(mime_type) or ""

    def store(self, content: bytes, mime_type: str) -> MediaRef:
        os.makedirs(self.base_dir, exist_ok=True)
        ref = MediaRef(f"{uuid4().hex}{self._extension(mime_type)}")
        target = self.base_dir / ref.value
        target.write_bytes(content)
        logger.info(f"Stored media {ref} ({len(content)} bytes, {mime_type})")
        return ref

    def resolve(self, ref: MediaRef) -> Path:
        path = (self.base_dir / ref.value).resolve()
        if path.parent != self.base_dir or not path.is_file():
            raise EntityNotFoundError(f"Media {ref} not found")
        return path
