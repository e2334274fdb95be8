"""
MemoPad Backend — Unexpected Error Middleware
==============================================

What:  Turns any exception no registered handler claimed into the JSON 500
       `{"error": "Internal Server Error"}`.
Why:   Starlette runs an `Exception` handler from ServerErrorMiddleware,
       which wraps the whole stack. A response built there never passes
       back through RequestIDMiddleware or CORSMiddleware, so it would lack
       X-Request-ID and Access-Control-Allow-Origin, and a browser client
       could not read the error body.
How:   Wraps call_next in try/except and builds the 500 itself.
Who:   Applied to every request via Starlette middleware.
When:  Innermost middleware (added first), directly around the router and
       its exception handlers.

Failure flow:
    MemoPadError / HTTPException / RequestValidationError
        → handled by the app's exception handlers, never reach here
    anything else (driver bugs, programming errors)
        → logged with traceback here → JSON 500
        → CORS adds its headers → Logging records 500 → RequestID tags it

Internal details (exception type, message, traceback) are logged only and
never sent to the client.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from memopad.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class UnexpectedErrorMiddleware(BaseHTTPMiddleware):
    """Last line of defence: nothing leaves the app as a bare traceback."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"error": INTERNAL_ERROR_MESSAGE},
            )
