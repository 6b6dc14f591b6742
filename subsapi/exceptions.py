"""
SubsAPI: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for the error scenarios the service
       layer can detect.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       structured JSON error responses.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    SubsAPIError (base)      → 500 Internal Server Error
    ├── ValidationError      → 400 Bad Request (client can fix)
    ├── NotFoundError        → 404 Not Found
    └── DatabaseError        → 500 Internal Server Error (generic message)

The overlap engine raises none of these; it assumes its inputs were
validated by SubscriptionService.
"""

from typing import Any, Dict, Optional


class SubsAPIError(Exception):
    """
    Base exception for all SubsAPI application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the
                  handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SubsAPIError):
    """
    Raised when client input fails a business rule.

    When:    Malformed MM-YYYY date, end date before start date, blank
             service name, query window ending before it starts.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, missing fields) never reach the
    service; FastAPI rejects them with 422 first.

    Example response:
        {
            "error": "validation_error",
            "message": "end_date must not be before start_date",
            "details": {"field": "end_date"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SubsAPIError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/v1/subscriptions/{id} with an unknown id.
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
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(SubsAPIError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The client only ever sees a generic message; the context (exception type,
    ids involved) is logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
