"""
Inkwell Backend: Service Root and Health Check
===============================================

What:  GET / (liveness banner) and GET /health (dependency probe).
Who:   Humans poking the server, Docker health checks and load balancers.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from inkwell import __version__
from inkwell.database import Database, get_database
from inkwell.schemas.common import HealthResponse
from inkwell.schemas.post import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get("/", response_model=MessageResponse, summary="Service banner")
async def root() -> MessageResponse:
    return MessageResponse(message="Blog API is running...")


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(database: Database = Depends(get_database)):
    """
    Probe the store with SELECT 1 and report aggregate status.

    Why lightweight: health checks run every few seconds; a real query
    against posts would cost more than it tells us.
    """
    db_status = "connected"
    overall = "healthy"

    try:
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    report = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if overall != "healthy":
        return JSONResponse(status_code=503, content=report.model_dump())
    return report
