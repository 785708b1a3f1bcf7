"""
ConnectionHandle Port - outbound side of one live client connection.
Implementation: chatline/infrastructure/realtime/websocket_channel.py

Contract:
- offer() never blocks and never raises for connection-level failures.
  It returns False when the event could not be queued (channel closed or
  its bounded buffer overflowed, in which case the channel closes itself).
- session_id is unique per connection and is what the connection registry
  compares before removing an entry.
"""

from abc import ABC, abstractmethod
from typing import Any


class ConnectionHandle(ABC):
    @property
    @abstractmethod
    def session_id(self) -> str: ...

    @property
    @abstractmethod
    def closed(self) -> bool: ...

    @abstractmethod
    def offer(self, event: dict[str, Any]) -> bool: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...
