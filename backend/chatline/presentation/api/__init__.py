"""
API Routers - FastAPI endpoint definitions.
"""

from chatline.presentation.api.conversations import router as conversations_router
from chatline.presentation.api.gateway import router as gateway_router
from chatline.presentation.api.media import router as media_router
from chatline.presentation.api.messages import router as messages_router
from chatline.presentation.api.metrics import router as metrics_router
from chatline.presentation.api.users import router as users_router

__all__ = [
    "conversations_router",
    "gateway_router",
    "media_router",
    "messages_router",
    "metrics_router",
    "users_router",
]
