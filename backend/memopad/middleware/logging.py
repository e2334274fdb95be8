"""
MemoPad Backend — Request Logging Middleware
=============================================

What:  One access-log line per request: method, path, status, duration,
       request ID, client address.
Why:   The API's only operational visibility; the log level follows the
       status class so failures stand out.
How:   Times call_next, then logs once the response (or the error guard's
       JSON 500) is ready. Fields are also attached as `extra` so a
       structured handler can index them.
Who:   Applied to every request; sits inside RequestIDMiddleware so the
       request ID is already set.
When:  Second in the chain, before the origin gate, so rejected origins
       (403) are logged too.

Log line:
    GET /memo/edit/7 404 1.3ms [3f9a1c2e] from 127.0.0.1

Level by status class:
    2xx/3xx → INFO     normal traffic
    4xx     → WARNING  client mistakes, unknown ids, denied origins
    5xx     → ERROR    storage or unexpected failures; the matching
                       traceback is logged by the handler with the same ID

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client address, request ID
    ❌ Don't log: request bodies (memo text), Authorization or Cookie headers
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from memopad.middleware.request_id import request_id_var

logger = logging.getLogger("memopad.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request once its response is ready.

    Level by status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    Requests to /health are not logged; monitoring polls would drown the log.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        # Health checks run every few seconds and would drown the log
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
