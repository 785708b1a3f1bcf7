"""
WebSocket endpoint - one SessionGateway per client connection.

    ws://host/ws?token=<jwt>     (or Authorization header / token cookie)

App-scoped collaborators (registry, identity provider) come from the root
container; each submission resolves its handler in a fresh REQUEST scope so
repositories are not shared across messages.
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, WebSocket
from dishka import AsyncContainer

from chatline.application.commands.chat import SubmitMessageHandler
from chatline.config.settings import Config
from chatline.domain.ports.identity_provider import IdentityProvider
from chatline.infrastructure.realtime.connection_registry import ConnectionRegistry
from chatline.presentation.realtime.session_gateway import SessionGateway

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    container: AsyncContainer = websocket.app.state.dishka_container

    @asynccontextmanager
    async def handler_scope():
        async with container() as request_container:
            yield await request_container.get(SubmitMessageHandler)

    gateway = SessionGateway(
        registry=await container.get(ConnectionRegistry),
        identity_provider=await container.get(IdentityProvider),
        handler_scope=handler_scope,
        outbound_queue_size=Config.OUTBOUND_QUEUE_SIZE,
    )
    await gateway.serve(websocket)
