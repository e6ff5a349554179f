"""
Notes Web — Health Check Route
===============================

What:  Liveness/readiness endpoint for process supervisors and probes.
How:   Pings the NoteStore with SELECT 1 and reports the result with the
       app version and uptime.
Who:   Called by Docker health checks, load balancers, and monitoring.

Status levels:
    - healthy:   store reachable
    - unhealthy: store unreachable (still HTTP 200; the body carries the state)
"""

import logging
import time

from fastapi import APIRouter, Depends

from notesweb import __version__
from notesweb.deps import get_store
from notesweb.schemas.note import HealthResponse
from notesweb.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/healthz",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: NoteStore = Depends(get_store)) -> HealthResponse:
    """Check the service and its store."""
    if await store.ping():
        db_status = "connected"
        overall = "healthy"
    else:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: note store unreachable")

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
