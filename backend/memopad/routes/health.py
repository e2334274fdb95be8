"""
MemoPad Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container health checks.
How:   Pings the database through the shared MemoStore.

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (still HTTP 200; the body carries the verdict)
"""

import logging
import time

from fastapi import APIRouter, Depends

from memopad import __version__
from memopad.database import get_memo_store
from memopad.schemas.memo import HealthResponse
from memopad.services.memo_store import MemoStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: MemoStore = Depends(get_memo_store)) -> HealthResponse:
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: database unreachable")

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
