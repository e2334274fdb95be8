"""
MemoPad Backend — Origin Policy Gate
=====================================

What:  Rejects cross-origin requests whose Origin header is not allow-listed.
Why:   Starlette's CORSMiddleware only withholds CORS headers from unknown
       origins; the request itself still reaches the route. The API must
       refuse those requests before any handler runs.
How:   A pure predicate (OriginPolicy.is_allowed) plus a middleware that
       answers 403 when it returns False. CORSMiddleware, configured from the
       same policy, still adds the response headers and answers preflights
       for admitted origins.

Decision table:
    Origin header absent              → admit (same-origin or non-browser)
    Origin exactly in allow-list      → admit
    anything else (incl. preflight)   → 403 {"error": "Not allowed by CORS"}
"""

import logging
from typing import Iterable, Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from memopad.exceptions import OriginDeniedError

logger = logging.getLogger(__name__)


class OriginPolicy:
    """
    Static, process-wide cross-origin policy.

    Attributes:
        allowed_origins:   exact origin strings that may call the API
        allowed_methods:   methods advertised in preflight responses
        allowed_headers:   request headers advertised in preflight responses
        allow_credentials: whether admitted origins may send cookies
    """

    ALLOWED_METHODS: Tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")
    ALLOWED_HEADERS: Tuple[str, ...] = ("Content-Type", "Authorization")

    def __init__(self, allowed_origins: Iterable[str], allow_credentials: bool = True):
        self.allowed_origins = frozenset(allowed_origins)
        self.allowed_methods = list(self.ALLOWED_METHODS)
        self.allowed_headers = list(self.ALLOWED_HEADERS)
        self.allow_credentials = allow_credentials

    def is_allowed(self, origin: Optional[str]) -> bool:
        """Admit when the origin is absent or an exact allow-list match."""
        if not origin:
            return True
        return origin in self.allowed_origins

    def check(self, origin: Optional[str]) -> None:
        """Raise OriginDeniedError for origins the policy does not admit."""
        if not self.is_allowed(origin):
            raise OriginDeniedError(origin=origin)

    def cors_options(self) -> dict:
        """Keyword arguments for Starlette's CORSMiddleware."""
        return {
            "allow_origins": sorted(self.allowed_origins),
            "allow_credentials": self.allow_credentials,
            "allow_methods": self.allowed_methods,
            "allow_headers": self.allowed_headers,
            "expose_headers": ["X-Request-ID", "Location"],
        }


class OriginPolicyMiddleware(BaseHTTPMiddleware):
    """
    Applies an OriginPolicy to every request, ahead of CORS handling and routing.

    Runs outside the exception-handler stack, so a denial is rendered here in
    the same {"error": ...} shape the error responder uses.
    """

    def __init__(self, app: ASGIApp, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get("origin")
        logger.debug("Requested origin: %s", origin)

        try:
            self.policy.check(origin)
        except OriginDeniedError as exc:
            logger.warning(
                "Rejected %s %s from origin %s", request.method, request.url.path, origin
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.message},
            )

        return await call_next(request)
