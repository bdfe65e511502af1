"""
Artfolio Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure the API reports.
Why:   Services raise typed errors; global handlers in main.py turn them into
       JSON responses with the right HTTP status. Services stay free of HTTP
       details and routes stay free of try/except blocks.
How:   Each exception carries a user-safe message and an optional context
       dict. The context is logged server-side and never returned verbatim.

Exception Hierarchy:
    ArtfolioError (base)
    ├── ValidationError              → 400 Bad Request
    ├── UnauthorizedError            → 401 Unauthorized
    │   └── InvalidCredentialsError  → 401 Unauthorized
    ├── ForbiddenError               → 403 Forbidden
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    ├── PayloadTooLargeError         → 413 Payload Too Large
    ├── UnsupportedMediaTypeError    → 415 Unsupported Media Type
    ├── FileStorageError             → 500 Internal Server Error
    └── DatabaseError                → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ArtfolioError(Exception):
    """
    Base exception for all Artfolio application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ArtfolioError):
    """
    Raised when client input is missing or invalid.

    When:    Missing title/category/image, invalid enquiry status, empty upload.
    HTTP:    400 Bad Request

    The optional field name is echoed back in the response details so the
    frontend can highlight the offending input.
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


class UnauthorizedError(ArtfolioError):
    """Missing, malformed or expired session token (401)."""

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(UnauthorizedError):
    """
    Login failed.

    The same message is used for an unknown email and a wrong password so
    the response does not reveal which accounts exist.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class ForbiddenError(ArtfolioError):
    """
    The caller is authenticated but not allowed to act on the resource.

    When:    Role mismatch (a client creating artwork) or ownership mismatch
             (editing someone else's artwork, reading another artist's enquiry).
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ArtfolioError):
    """
    Raised when a requested resource does not exist.

    Malformed identifiers are reported the same way: from the client's point
    of view "not a valid id" and "no such id" are the same answer.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(ArtfolioError):
    """Duplicate value for a unique field: email, category name, saved artist (409)."""

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PayloadTooLargeError(ArtfolioError):
    """
    Upload exceeds the size ceiling for its kind.

    HTTP:    413 Payload Too Large
    Details: max_size_mb is returned so the client can tell the user the limit.
    """

    def __init__(
        self,
        max_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        max_mb = max_size / (1024 * 1024)
        message = f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image."
        ctx = context or {}
        ctx["max_size_mb"] = round(max_mb, 2)
        super().__init__(message=message, context=ctx)
        self.max_size = max_size


class UnsupportedMediaTypeError(ArtfolioError):
    """Upload is not an image, or its bytes could not be decoded as one (415)."""

    def __init__(
        self,
        message: str = "Only image files are allowed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(ArtfolioError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable.
    HTTP:    500 Internal Server Error (paths are logged, never returned)
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ArtfolioError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Query text,
        constraint names and driver errors go to the log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
