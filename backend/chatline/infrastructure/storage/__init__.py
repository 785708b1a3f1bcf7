from chatline.infrastructure.storage.disk_blob_store import DiskBlobStore

__all__ = ["DiskBlobStore"]
