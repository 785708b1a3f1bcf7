"""
DTOs - Data Transfer Objects

- chat.py → MessageDTO
- user.py → UserDTO
- events.py → WebSocket frames (SubmitEvent in, Deliver/Ack/Error/Pong out)

Note: These are different from domain entities.
DTOs are for API input/output, entities are for business logic.
"""

from chatline.application.dto.chat import MessageDTO
from chatline.application.dto.user import UserDTO
from chatline.application.dto.events import (
    AckEvent,
    DeliverEvent,
    ErrorEvent,
    PingEvent,
    PongEvent,
    SubmitEvent,
    parse_inbound,
)

__all__ = [
    "MessageDTO",
    "UserDTO",
    "AckEvent",
    "DeliverEvent",
    "ErrorEvent",
    "PingEvent",
    "PongEvent",
    "SubmitEvent",
    "parse_inbound",
]
