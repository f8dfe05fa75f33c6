"""
DevConnect Backend — Access Log Middleware
============================================

What:  One access-log line per HTTP request on the "devconnect.access" logger.
How:   Times call_next() and logs method, path, status, duration, request ID,
       client IP and the acting account (set on request.state by
       get_current_account), at a level chosen by status class.

Never logged: request bodies (signup/login/password carry plain passwords),
the auth cookie and the Authorization header.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("devconnect.access")

# Probes hit these every few seconds
SKIP_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status in (401, 429):
        # Expired cookies and throttled clients are routine
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        client_ip = request.client.host if request.client else "unknown"
        account_id = getattr(request.state, "account_id", None)
        actor = str(account_id) if account_id else "anonymous"

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] %s from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id_var.get(""),
            actor,
            client_ip,
            extra={
                "request_id": request_id_var.get(""),
                "account_id": actor,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
