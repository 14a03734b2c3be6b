"""
Spacetime Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return responses with the matching HTTP status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    SpacetimeError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized (missing/invalid token)
    ├── NotOwnerError            → 401 Unauthorized (empty body)
    ├── NotFoundError            → 500 (unknown record id)
    ├── UpstreamAuthError        → 502 Bad Gateway (GitHub unreachable)
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error

The `context` dict is logged server-side and never returned for 5xx errors.
"""

from typing import Any, Dict, Optional


class SpacetimeError(Exception):
    """
    Base exception for all Spacetime application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only echoed for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SpacetimeError):
    """
    Raised when client input fails a business rule the schema cannot express.

    When:    Upload content type not image/video, file too large, empty file.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Only image and video uploads are accepted",
            "details": {"field": "file", "content_type": "application/pdf"}
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


class AuthenticationError(SpacetimeError):
    """
    Raised when a request carries no usable session token.

    When:    Missing Authorization header, malformed bearer value, bad
             signature, expired token, or a `sub` claim that is not a UUID.
    HTTP:    401 Unauthorized with `WWW-Authenticate: Bearer`
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotOwnerError(SpacetimeError):
    """
    Raised when the caller may not see or change a memory.

    When:    Reading a private memory owned by someone else, or updating /
             deleting any memory owned by someone else.
    HTTP:    401 Unauthorized with an empty body
    """

    def __init__(
        self,
        memory_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ):
        ctx: Dict[str, Any] = {}
        if memory_id:
            ctx["memory_id"] = memory_id
        if user_id:
            ctx["user_id"] = user_id
        super().__init__(message="Not the owner of this memory", context=ctx)


class NotFoundError(SpacetimeError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /memories/{id} with an unknown UUID.
    HTTP:    500 Internal Server Error (generic body)

    SQLAlchemy returns None for missing rows; the service layer converts that
    into this exception.
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


class UpstreamAuthError(SpacetimeError):
    """
    Raised when the GitHub OAuth exchange fails after all retries.

    When:    GitHub returned a 5xx, timed out, or sent an unreadable response.
    HTTP:    502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "GitHub sign-in is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(SpacetimeError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(SpacetimeError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; the SQL error is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
