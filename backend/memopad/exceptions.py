"""
MemoPad Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure the API can report.
Why:   Each exception declares the HTTP status it maps to, so a single error
       responder (registered in main.py) can shape every failure the same way.
How:   Each exception class carries a message, optional context dict, and a
       `status_code` class attribute.

Exception Hierarchy:
    MemoPadError (base)               → 500
    ├── ValidationError               → 400 Bad Request
    ├── NotFoundError                 → 404 Not Found
    ├── OriginDeniedError             → 403 Forbidden
    └── DatabaseError                 → 500 Internal Server Error
        ├── StatementPreparationError (statement could not be built)
        └── StatementExecutionError   (statement could not be run)
"""

from typing import Any, Dict, Optional


class MemoPadError(Exception):
    """
    Base exception for all MemoPad application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the error responder uses for this error
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MemoPadError):
    """Raised when the client sent a request body the API cannot use."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MemoPadError):
    """
    Raised when a requested resource does not exist.

    The storage layer returns None for missing rows; routes convert that into
    this exception. The message is fixed per resource so clients can match it;
    the requested id only goes into the logged context.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "memo",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)
        self.resource_id = resource_id


class OriginDeniedError(MemoPadError):
    """Raised by the origin policy gate for origins outside the allow-list."""

    status_code = 403

    def __init__(
        self,
        origin: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["origin"] = origin
        super().__init__(message="Not allowed by CORS", context=ctx)
        self.origin = origin


class DatabaseError(MemoPadError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic.
        The SQL statement and driver error are kept in `context` and only
        ever logged server-side.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StatementPreparationError(DatabaseError):
    """The SQL statement could not be built or compiled for the database."""


class StatementExecutionError(DatabaseError):
    """The SQL statement was built but the database failed to run it."""
