# Middleware package init
"""
MemoPad Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Origin Policy] → [CORS] → [Error Guard] → Route Handler

    1. Request ID: correlation ID for logging and the X-Request-ID header
    2. Logging: one access line per request, including rejected ones
    3. Origin Policy: 403 for origins outside the allow-list, before routing
    4. CORS: Starlette's CORSMiddleware (response headers, preflight)
    5. Error Guard: JSON 500 for anything the exception handlers did not claim
"""
