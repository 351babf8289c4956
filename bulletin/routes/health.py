"""
Bulletin Board API — Health Check Route
=========================================

What:  GET /health for load balancer and container probes (HTTP surface only).
How:   Runs SELECT 1 on the pool and reports the configured layout and
       analysis provider. Vendors are not probed: a health check should not
       spend API quota.

    healthy    database reachable     → 200
    unhealthy  database unreachable   → 503
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from bulletin import __version__
from bulletin.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Module load time, used for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request):
    """Probe the database and describe the running configuration."""
    container = request.app.state.container
    db_status = "connected"
    overall = "healthy"

    try:
        async with container.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    report = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        schema_variant=container.variant.name,
        analysis_provider=getattr(container.analysis, "name", "unknown"),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=200 if overall == "healthy" else 503,
        content=report.model_dump(),
    )
