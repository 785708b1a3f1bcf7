"""
Timeout and error bounding shared by the Prisma store and directory.

Timeouts and Prisma engine/connection errors surface as StoreUnavailableError
so callers see one retryable failure type whatever the backend did.
"""

import asyncio
import logging
import time
from typing import Awaitable, TypeVar

from prisma.errors import PrismaError

from chatline.domain.exceptions.store_unavailable import StoreUnavailableError
from chatline.observability.metrics import observe_store_latency

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded(operation: str, awaitable: Awaitable[T], timeout: float) -> T:
    started = time.perf_counter()
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning(f"[Store] {operation} timed out after {timeout}s")
        raise StoreUnavailableError(f"{operation} timed out") from e
    except PrismaError as e:
        logger.warning(f"[Store] {operation} failed: {e}")
        raise StoreUnavailableError(f"{operation} failed") from e
    finally:
        observe_store_latency(operation, time.perf_counter() - started)
