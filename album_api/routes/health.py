"""
Album API: Liveness and Health Routes
======================================

What:  GET /ping (fixed liveness payload) and GET /health (store probe).
Who:   Called by container health checks, load balancers and monitoring.

    /ping    never touches the store; answers as long as the process serves
    /health  probes the active store; 503 when it is unreachable
"""

import asyncio
import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from album_api import __version__
from album_api.config import settings
from album_api.dependencies import get_album_store
from album_api.schemas.album import HealthResponse, PingResponse
from album_api.services.album_store import AlbumStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/ping",
    response_model=PingResponse,
    summary="Liveness check",
)
async def ping() -> PingResponse:
    """Respond with a fixed message."""
    return PingResponse(message="ok")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(store: AlbumStore = Depends(get_album_store)):
    """
    Probe the active store and report aggregate status.

    The probe is bounded by settings.connect_timeout; a probe that times out
    counts as unavailable.
    """
    try:
        available = await asyncio.wait_for(store.health_check(), timeout=settings.connect_timeout)
    except asyncio.TimeoutError:
        logger.warning("Health check: %s store probe timed out", store.name)
        available = False

    body = HealthResponse(
        status="healthy" if available else "unhealthy",
        version=__version__,
        store=store.name,
        store_status="available" if available else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not available:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
