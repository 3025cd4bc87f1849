"""
Mood Journal Backend — Access Logging Middleware
==================================================

One line per request on the `moodjournal.access` logger:

    PUT /api/journal/entries/{entry_id} 404 3.2ms [a1b2c3d4]

The route template is logged instead of the raw path, so entry ids stay
out of the access log and lines group by endpoint. Request bodies and the
Authorization header are never logged. Health probes and CORS preflights
are skipped.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from moodjournal.middleware.request_id import request_id_var

logger = logging.getLogger("moodjournal.access")

SKIPPED_PATHS = {"/health"}


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = _route_template(request)
        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s]",
            request.method,
            route,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            extra={"route": route, "duration_ms": round(elapsed_ms, 2)},
        )
        return response
