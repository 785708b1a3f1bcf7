"""
Session Gateway - lifecycle of one client WebSocket.

State machine per connection:

    UNAUTHENTICATED ──token ok──► AUTHENTICATED ──disconnect──► CLOSED
           │                                                      ▲
           └──────────────token missing/invalid───────────────────┘

- The credential is taken from the handshake (header, cookie or query
  parameter), never in-band. A rejected handshake is closed with 1008 before
  accept and the connection registry is not touched.
- Once authenticated the connection is registered; inbound submit frames are
  handed to SubmitMessageHandler, which pushes Deliver/Ack frames through the
  connection's WebSocketChannel.
- On disconnect the registry entry is removed only if it still belongs to
  this connection's session.

The gateway never interprets message content; validation errors come back
from the handler and are turned into error frames.
"""

import logging
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Callable, Optional

from pydantic import ValidationError
from starlette.websockets import WebSocket, WebSocketDisconnect

from chatline.application.commands.chat.submit_message import (
    SubmitMessageCommand,
    SubmitMessageHandler,
)
from chatline.application.dto.events import ErrorEvent, PongEvent, SubmitEvent, parse_inbound
from chatline.config.settings import Config
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.domain.value_objects.media_ref import MediaRef
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.realtime.connection_registry import ConnectionRegistry
from chatline.infrastructure.realtime.websocket_channel import WebSocketChannel
from chatline.observability.metrics import MetricsErrorType, increment_error

logger = logging.getLogger(__name__)

CLOSE_POLICY_VIOLATION = 1008

HandlerScope = Callable[[], AbstractAsyncContextManager[SubmitMessageHandler]]


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    CLOSED = "closed"


def extract_token(websocket: WebSocket) -> str:
    """Handshake credential: Authorization header, then auth cookie, then ?token=."""
    authorization = websocket.headers.get("authorization", "")
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return (
        websocket.cookies.get(Config.AUTH_COOKIE_NAME)
        or websocket.query_params.get("token")
        or ""
    )


class SessionGateway:
    def __init__(
        self,
        registry: ConnectionRegistry,
        identity_provider: IdentityProvider,
        handler_scope: HandlerScope,
        outbound_queue_size: int = Config.OUTBOUND_QUEUE_SIZE,
    ):
        self._registry = registry
        self._identity_provider = identity_provider
        self._handler_scope = handler_scope
        self._outbound_queue_size = outbound_queue_size
        self.state = SessionState.UNAUTHENTICATED
        self.user_id: Optional[UserId] = None

    async def serve(self, websocket: WebSocket) -> None:
        try:
            user_id = await self._identity_provider.verify_credentials(
                extract_token(websocket)
            )
        except UnauthorizedError as e:
            logger.info(f"WebSocket handshake rejected: {e}")
            increment_error(MetricsErrorType.UNAUTHORIZED)
            self.state = SessionState.CLOSED
            await websocket.close(code=CLOSE_POLICY_VIOLATION, reason="Unauthorized")
            return

        await websocket.accept()
        channel = WebSocketChannel(websocket, max_pending=self._outbound_queue_size)
        channel.start()
        self.user_id = user_id
        self.state = SessionState.AUTHENTICATED
        self._registry.register(user_id, channel)

        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))
                raw = frame.get("text")
                if raw is None:
                    channel.offer(
                        ErrorEvent(
                            code="invalid_argument", detail="Only text frames are supported"
                        ).model_dump(mode="json")
                    )
                    continue
                await self._dispatch(user_id, channel, raw)
        except WebSocketDisconnect as e:
            logger.debug(f"User {user_id} session {channel.session_id} closed ({e.code})")
        finally:
            self.state = SessionState.CLOSED
            self._registry.remove(user_id, channel.session_id)
            await channel.close()

    async def _dispatch(self, user_id: UserId, channel: WebSocketChannel, raw: str) -> None:
        try:
            event = parse_inbound(raw)
        except ValidationError as e:
            channel.offer(
                ErrorEvent(
                    code="invalid_argument",
                    detail=f"Malformed frame: {e.error_count()} validation error(s)",
                ).model_dump(mode="json")
            )
            return

        if isinstance(event, SubmitEvent):
            await self._submit(user_id, channel, event)
        else:
            channel.offer(PongEvent().model_dump(mode="json"))

    async def _submit(
        self, user_id: UserId, channel: WebSocketChannel, event: SubmitEvent
    ) -> None:
        try:
            command = SubmitMessageCommand(
                sender_id=user_id,
                receiver_id=UserId(event.receiver_id),
                content=event.content,
                media_ref=MediaRef(event.media_ref) if event.media_ref else None,
                origin=channel,
                client_id=event.client_id,
            )
            async with self._handler_scope() as handler:
                await handler.execute(command)
        except (DomainValidationError, ValueError) as e:
            self._reject(channel, event, MetricsErrorType.INVALID_ARGUMENT, str(e))
        except EntityNotFoundError as e:
            self._reject(channel, event, MetricsErrorType.NOT_FOUND, str(e))
        except StoreUnavailableError as e:
            self._reject(channel, event, MetricsErrorType.STORE_UNAVAILABLE, str(e))
        except Exception:
            logger.exception(f"Submission from user {user_id} failed unexpectedly")
            self._reject(
                channel, event, MetricsErrorType.STORE_UNAVAILABLE, "Message could not be processed"
            )

    def _reject(
        self, channel: WebSocketChannel, event: SubmitEvent, code: str, detail: str
    ) -> None:
        increment_error(code)
        logger.info(f"Submission from user {self.user_id} rejected ({code}): {detail}")
        channel.offer(
            ErrorEvent(code=code, detail=detail, client_id=event.client_id).model_dump(
                mode="json"
            )
        )
