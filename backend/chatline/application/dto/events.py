"""
WebSocket frames exchanged with an authenticated connection.

Client → Server:
    {"type": "submit", "receiver_id": 3, "content": "hi", "media_ref": null, "client_id": "tmp-1"}
    {"type": "ping"}

Server → Client:
    {"type": "deliver", "message": {...}}
    {"type": "ack", "client_id": "tmp-1", "message": {...}}
    {"type": "error", "code": "invalid_argument", "detail": "...", "client_id": "tmp-1"}
    {"type": "pong"}
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from chatline.application.dto.chat import MessageDTO


class SubmitEvent(BaseModel):
    type: Literal["submit"]
    receiver_id: int
    content: Optional[str] = None
    media_ref: Optional[str] = None
    client_id: Optional[str] = Field(default=None, max_length=128)


class PingEvent(BaseModel):
    type: Literal["ping"]


InboundEvent = Annotated[Union[SubmitEvent, PingEvent], Field(discriminator="type")]

_inbound_adapter: TypeAdapter[InboundEvent] = TypeAdapter(InboundEvent)


def parse_inbound(raw: str) -> Union[SubmitEvent, PingEvent]:
    """Parse one inbound text frame. Raises pydantic.ValidationError when malformed."""
    return _inbound_adapter.validate_json(raw)


class DeliverEvent(BaseModel):
    type: Literal["deliver"] = "deliver"
    message: MessageDTO


class AckEvent(BaseModel):
    type: Literal["ack"] = "ack"
    client_id: Optional[str] = None
    message: MessageDTO


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    code: str
    detail: str
    client_id: Optional[str] = None


class PongEvent(BaseModel):
    type: Literal["pong"] = "pong"
