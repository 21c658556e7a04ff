"""
Journeo Backend — Health Check Route
======================================

What:  GET /health for container probes and load balancers.
How:   Runs a `SELECT 1` against the database and a write probe against the
       media directory. Either failing makes the service unhealthy (503):
       a backend that cannot read its tables or store uploads cannot serve
       its API.
"""

import logging
import time

from fastapi import APIRouter, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from journeo import __version__
from journeo.database import engine
from journeo.schemas.common import HealthResponse
from journeo.services.media_storage import media_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A dependency is down", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    storage_status = "writable"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Media Storage ───────────────────────────────────────────────
    if not await media_storage.is_writable():
        storage_status = "unavailable"
        overall = "unhealthy"

    if overall != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        storage=storage_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
