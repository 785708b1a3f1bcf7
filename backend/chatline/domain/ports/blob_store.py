"""
BlobStore Port - "store file, get reference" contract for media.
Implementation: chatline/infrastructure/storage/disk_blob_store.py
"""

from abc import ABC, abstractmethod
from pathlib import Path

from chatline.domain.value_objects.media_ref import MediaRef


class BlobStore(ABC):
    @abstractmethod
    def store(self, content: bytes, mime_type: str) -> MediaRef: ...

    @abstractmethod
    def resolve(self, ref: MediaRef) -> Path:
        """Return a retrievable path or raise EntityNotFoundError."""
        ...
