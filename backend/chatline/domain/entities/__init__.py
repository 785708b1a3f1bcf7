"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from chatline.domain.entities.message import Message
from chatline.domain.entities.user import User
from chatline.domain.entities.live_session import LiveSession

__all__ = [
    "Message",
    "User",
    "LiveSession",
]
