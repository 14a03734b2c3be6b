"""
Spacetime Backend: Request Logging Middleware
==============================================

What:  One access log line per request.
How:   Times the downstream call and logs method, path, status, duration,
       request id, client IP and (when authenticated) the caller's user id.
       Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.

Never logged: request bodies, Authorization headers, uploaded file bytes.

Example:
    GET /memories 200 12.4ms [a1b2c3d4] from 10.0.0.7 user=5d0c...
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("spacetime.access")

# Probes and static media would drown the log
QUIET_PREFIXES = ("/health", "/uploads/")


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with duration and caller identity."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = getattr(request.state, "request_id", "")
        user_id = getattr(request.state, "user_id", None)
        status = response.status_code

        logger.log(
            _level_for(status),
            "%s %s %d %.1fms [%s] from %s user=%s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            user_id or "-",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
                "user_id": str(user_id) if user_id else None,
            },
        )
        return response
