"""
Mood Journal Backend — Health Check Route
===========================================

What:  Liveness probe for Docker and load balancers.
How:   Checks the two things every entry request needs: a reachable
       database (`SELECT 1`) and a session provider able to verify tokens.

Status levels:
    healthy:   both checks pass                              200
    degraded:  database up, tokens cannot be verified        200
               (every entry request will answer 401)
    unhealthy: database unreachable                          503
"""

import logging
import time

from fastapi import APIRouter, Request, Response
from sqlalchemy import text

from moodjournal import __version__
from moodjournal import database
from moodjournal.schemas.entry import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _database_reachable() -> bool:
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return False
    return True


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    db_ok = await _database_reachable()
    auth_ok = request.app.state.session_provider.ready

    if not db_ok:
        overall = "unhealthy"
        response.status_code = 503
    elif not auth_ok:
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(
        status=overall,
        version=__version__,
        database="connected" if db_ok else "disconnected",
        auth="configured" if auth_ok else "not configured",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
