"""
DumbPad Backend — Health Check Route
======================================

What:  GET /health for container and load balancer probes.
How:   Confirms the data directory exists and is writable. It lives outside
       /api, so the PIN gate never applies.

Status levels:
    - healthy:   data directory writable (HTTP 200)
    - unhealthy: data directory missing or read-only (HTTP 503)
"""

import logging
import os
import time

from fastapi import APIRouter, Depends, Response

from dumbpad import __version__
from dumbpad.dependencies import get_registry
from dumbpad.schemas.notepad import HealthResponse
from dumbpad.services.registry import NotepadRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    registry: NotepadRegistry = Depends(get_registry),
) -> HealthResponse:
    root = registry.files.storage_root
    data_status = "writable"
    overall = "healthy"

    if not (root.is_dir() and os.access(root, os.W_OK)):
        data_status = "unavailable"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: data directory %s is not writable", root)

    return HealthResponse(
        status=overall,
        version=__version__,
        data_dir=data_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
