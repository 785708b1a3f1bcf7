"""
LiveSession Entity - binds a user to the one connection currently serving them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class LiveSession:
    user_id: UserId
    handle: ConnectionHandle
    connected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def session_id(self) -> str:
        return self.handle.session_id
