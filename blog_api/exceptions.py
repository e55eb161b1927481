"""
Blog API — Custom Exception Hierarchy
======================================

What:  Application-specific exceptions for the error scenarios of the API.
Why:   Services raise these instead of building responses; global exception
       handlers (registered in main.py) map each type to an HTTP status and a
       consistent JSON error body.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by the validation layer and the services; caught by global handlers.

Exception Hierarchy:
    BlogApiError (base)
    ├── ValidationError          → 400 Bad Request (missing/mismatched/malformed input)
    ├── ConflictError            → 400 Bad Request (user name already taken)
    ├── InvalidReferenceError    → 400 Bad Request (author id does not resolve)
    ├── NotFoundError            → 404 Not Found
    └── DatabaseError            → 500 Internal Server Error

ConflictError and InvalidReferenceError are 400 rather than 409/422 because
clients of this API already expect 400 for both cases.
"""

from typing import Any, Dict, Optional


class BlogApiError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogApiError):
    """
    Raised when client input fails validation.

    When:    Missing required field, path/body id mismatch, wrong type, empty title.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Missing title in request body",
            "details": {"field": "title"}
        }
    """

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


class ConflictError(BlogApiError):
    """
    Raised when a write would break a uniqueness rule.

    When:    Creating or renaming an author to a user name another author holds.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "User name already taken",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidReferenceError(BlogApiError):
    """
    Raised when a payload references a record that does not exist.

    When:    POST /blog-posts with an author_id that is malformed or unknown,
             or whose lookup failed.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Invalid reference",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogApiError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT on a post or author id with no matching record.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records (not an exception); the
    service layer converts None into this exception.
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


class DatabaseError(BlogApiError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error
    info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
