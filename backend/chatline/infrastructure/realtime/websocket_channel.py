"""
WebSocketChannel - bounded, non-blocking outbound side of a WebSocket.

The router calls offer() from the submit path of *another* user, so a slow or
stalled recipient must never make that call wait:

    offer() ──put_nowait──► asyncio.Queue(maxsize) ──pump task──► websocket.send_json()

- Queue full: the channel closes itself (close code 1013, "try again later")
  and drops the event. The client recovers by fetching history on reconnect.
- Send failure inside the pump: the channel is marked closed and the error is
  logged; nothing propagates to the router.
"""

import asyncio
import logging
from typing import Any, Optional
from uuid import uuid4

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from chatline.domain.ports.connection_handle import ConnectionHandle
from chatline.observability.metrics import increment_outbound_overflow

logger = logging.getLogger(__name__)

CLOSE_TRY_AGAIN_LATER = 1013


class WebSocketChannel(ConnectionHandle):
    def __init__(self, websocket: WebSocket, max_pending: int = 256):
        if max_pending <= 0:
            raise ValueError("max_pending must be positive")
        self._websocket = websocket
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max_pending)
        self._session_id = uuid4().hex
        self._closed = False
        self._pump_task: Optional[asyncio.Task] = None
        self._close_task: Optional[asyncio.Task] = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        """Start the pump task. Must be called from the event loop serving the socket."""
        if self._pump_task is None:
            self._pump_task = asyncio.create_task(
                self._pump(), name=f"ws-pump-{self._session_id}"
            )

    def offer(self, event: dict[str, Any]) -> bool:
        if self._closed:
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                f"Outbound buffer full for session {self._session_id} "
                f"({self._queue.maxsize} pending), closing connection"
            )
            increment_outbound_overflow()
            self._closed = True
            self._close_task = asyncio.create_task(
                self.close(CLOSE_TRY_AGAIN_LATER, "outbound buffer overflow")
            )
            return False
        return True

    async def _pump(self) -> None:
        try:
            while True:
                event = await self._queue.get()
                await self._websocket.send_json(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Peer went away mid-send; undelivered events stay in history.
            logger.info(f"Send failed on session {self._session_id}: {e}")
            self._closed = True

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self._closed = True
        task = self._pump_task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._websocket.application_state == WebSocketState.CONNECTED:
            try:
                await self._websocket.close(code=code, reason=reason)
            except (RuntimeError, WebSocketDisconnect) as e:
                # Already closed by the peer or the server loop.
                logger.debug(f"Close on session {self._session_id} ignored: {e}")
