"""
Album API: Request Dependencies
================================

What:  FastAPI dependencies and helpers shared by the route handlers.
How:   get_album_store() hands each request the store installed on
       app.state by the application factory or lifespan. call_store() awaits
       one store operation under the request deadline.
Who:   routes/albums.py and routes/health.py.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import Request

from album_api.config import settings
from album_api.exceptions import StoreError
from album_api.services.album_store import AlbumStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_album_store(request: Request) -> AlbumStore:
    """
    FastAPI dependency returning the application's AlbumStore.

    Raises:
        StoreError: No store has been installed (startup did not complete).
    """
    store = getattr(request.app.state, "albums", None)
    if store is None:
        raise StoreError(message="Album store is not initialized")
    return store


async def call_store(
    operation: str,
    call: Awaitable[T],
    timeout: Optional[float] = None,
) -> T:
    """
    Await a store call, bounded by the request deadline.

    On expiry the pending call is cancelled, which aborts its in-flight I/O
    and releases any pooled connection it holds.

    Args:
        operation:  Store operation name, recorded on the raised error
        call:       The store coroutine to await
        timeout:    Seconds; defaults to settings.request_timeout

    Raises:
        StoreError: The deadline elapsed before the call completed.
    """
    timeout = settings.request_timeout if timeout is None else timeout
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("Store operation %s exceeded %.2fs deadline", operation, timeout)
        raise StoreError(
            message=f"Album store did not respond within {timeout:g} seconds",
            operation=operation,
            cause=e,
            context={"timeout_seconds": timeout},
        ) from e
