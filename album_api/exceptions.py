"""
Album API: Custom Exception Hierarchy
======================================

What:  Defines application-specific exceptions for the album service.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by stores and route handlers; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    AlbumServiceError (base)
    ├── ValidationError          → 400 Bad Request (malformed id or body)
    ├── NotFoundError            → 404 Not Found
    └── StoreError               → 500 Internal Server Error
        └── ConsistencyError     → 500 (more than one row for a unique id)

Store errors carry the failed operation and the underlying error text in
their context. The context is logged server-side; it reaches the client only
when settings.expose_error_details is enabled.
"""

from typing import Any, Dict, Optional


class AlbumServiceError(Exception):
    """
    Base exception for all album service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned by default)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AlbumServiceError):
    """
    Raised when client input fails validation.

    When:    Non-integer album id in the path, malformed or incomplete JSON body.
    HTTP:    400 Bad Request

    FastAPI's own RequestValidationError is translated into the same 400
    response shape by the handlers in main.py.
    """

    def __init__(
        self,
        message: str = "Invalid request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(AlbumServiceError):
    """
    Raised when a requested album does not exist.

    When:    GET /albums/{id} with an id that matches no row.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(AlbumServiceError):
    """
    Raised when a store operation fails.

    What:    The backing store could not complete the operation: a driver or
             connection error, pool exhaustion, or the request deadline
             expiring mid-operation.
    HTTP:    500 Internal Server Error

    Attributes:
        operation:  Name of the store operation that failed (get_all, get_by_id, insert)
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if cause is not None:
            ctx["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message=message, context=ctx)
        self.operation = operation


class ConsistencyError(StoreError):
    """
    Raised when a lookup by unique identifier matches more than one row.

    Unreachable while the primary key constraint holds; surfaced as a 500
    instead of silently picking one of the rows.
    """

    def __init__(
        self,
        resource_id: str,
        row_count: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource_id"] = resource_id
        ctx["row_count"] = row_count
        super().__init__(
            message=f"Expected one album with ID '{resource_id}', found {row_count}",
            operation="get_by_id",
            context=ctx,
        )
