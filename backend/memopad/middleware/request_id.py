"""
MemoPad Backend — Request ID Middleware
========================================

What:  Tags every request with a short correlation ID and returns it in the
       X-Request-ID response header.
Why:   Lets a client quote the ID of a failing call and lets every log line
       of one request be grouped together.
How:   Honors a client-supplied X-Request-ID, otherwise generates one; stores
       it in a ContextVar for loggers and in request.state for handlers.
Who:   Applied to every request via Starlette middleware.
When:  Outermost middleware (added last), so even responses produced by the
       origin gate or the unexpected-error guard carry the header.

Why request IDs matter here:
    The API answers every failure with a bare {"error": message}. Internal
    details (SQL, driver messages, tracebacks) are logged only. The request
    ID is the link between the two:
    - the client reports "X-Request-ID: 3f9a1c2e"
    - the access line and any error lines for that call share "[3f9a1c2e]"

Client-supplied IDs:
    A frontend may generate its own ID per user action and send it along.
    It is echoed unchanged, so UI event → API call → log entry can be traced
    with one value.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request ID and echoes it back to the client.

    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate a short ID from a UUID4
        3. Store it in request_id_var for the duration of the request
        4. Add it to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 characters of a UUID is enough for correlation and reads well in logs
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        # Set after the inner stack has built the response, whatever produced it
        response.headers["X-Request-ID"] = rid
        return response
