"""
PORTS - Interfaces the domain needs from the outside world.

Infrastructure provides the implementations; the DI container wires them.
"""

from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.domain.ports.blob_store import BlobStore

__all__ = [
    "ConnectionHandle",
    "IdentityProvider",
    "BlobStore",
]
