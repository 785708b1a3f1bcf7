"""
Realtime Layer - live connection bookkeeping.
"""

from chatline.infrastructure.realtime.connection_registry import ConnectionRegistry
from chatline.infrastructure.realtime.websocket_channel import WebSocketChannel

__all__ = [
    "ConnectionRegistry",
    "WebSocketChannel",
]
