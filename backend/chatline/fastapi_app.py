"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- /ws (WebSocket session gateway)
- users, conversations, messages, media, metrics, health
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional, Type

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka

from chatline import __version__
from chatline.config.logging_config import setup_logging, correlation_id_var
from chatline.config.settings import Config, get_config
from chatline.infrastructure.realtime import ConnectionRegistry
from chatline.observability.metrics import observe_request_latency
from chatline.presentation.api import (
    conversations_router,
    gateway_router,
    media_router,
    messages_router,
    metrics_router,
    users_router,
)
from chatline.setup.ioc import create_container

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", "NO Correlation ID")

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request latency labelled by route template, not raw path."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        route = request.scope.get("route")
        observe_request_latency(
            method=request.method,
            route=getattr(route, "path", "unmatched"),
            status_code=response.status_code,
            duration=time.perf_counter() - start,
        )
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    - Startup: container and Dishka already set up by the factory
    - Shutdown: close DI container (disconnects Prisma / Redis)
    """
    logger.info("Chatline started. DI container initialized.")
    yield
    container: AsyncContainer = app.state.dishka_container
    registry = await container.get(ConnectionRegistry)
    logger.info(f"Shutting down with {registry.count()} live session(s)")
    await container.close()
    logger.info("Chatline shutdown. DI container closed.")


def create_fastapi_app(
    config: Optional[Type[Config]] = None,
    container: Optional[AsyncContainer] = None,
) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Each call builds its own container unless one is passed in, so two apps
    never share a connection registry or an in-memory store.
    """
    config = config or get_config()
    config.validate()
    setup_logging(config.LOG_LEVEL, config.LOG_PATH or None)

    app = FastAPI(
        title="Chatline API",
        description="Real-time one-to-one messaging backend",
        version=__version__,
        lifespan=lifespan,
    )

    # Setup Dishka BEFORE app starts (must add middleware before startup)
    setup_dishka(container or create_container(config), app)

    app.add_middleware(MetricsMiddleware)
    # Correlation ID middleware (must be added before CORS)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.info(f"Validation error on {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"error": "Validation error", "details": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {type(exc).__name__}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    # Health check routes
    @app.get("/", tags=["health"])
    async def root():
        return {"message": "Chatline server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(users_router)  # /users/me, /users/search, /users/{id}
    app.include_router(conversations_router)  # /conversations, /conversations/{key}/messages
    app.include_router(messages_router)  # POST /messages
    app.include_router(media_router)  # POST /media, GET /media/{ref}
    app.include_router(metrics_router)  # GET /metrics
    app.include_router(gateway_router)  # WS /ws

    return app


def jsonable_errors(errors) -> list[dict]:
    """Pydantic error dicts may carry exception objects in ctx; keep them printable."""
    return [
        {key: (str(value) if key == "ctx" else value) for key, value in error.items()}
        for error in errors
    ]


# Create the app instance
app = create_fastapi_app()
