"""
Roster Backend — Health Check Route
=====================================

What:  Liveness endpoint for monitoring, container probes and trainees'
       first "is the server up?" check.
How:   The service has no external dependencies, so a response at all means
       healthy. The body reports the server time, version and uptime.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from app import __version__
from app.schemas.student import HealthResponse

router = APIRouter(tags=["Health"])

# Track when the service started for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns status 'ok' with the current server time in ISO 8601 (UTC).",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        time=datetime.now(timezone.utc),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
