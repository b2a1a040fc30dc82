"""
DumbPad Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for PIN checks, notepad lookups and storage.
How:   Each exception carries a user-facing message and an optional context dict.
       Global exception handlers (registered in main.py) map them to HTTP status
       codes and a uniform JSON error body. The PIN gate middleware renders its
       denials with the same body via ``error_code`` / ``status_code``.

Exception Hierarchy:
    DumbPadError (base)
    ├── ValidationError            → 400 Bad Request
    │   └── PinFormatError         → 400 Bad Request (malformed PIN)
    ├── InvalidOperationError      → 400 Bad Request (e.g. deleting "default")
    ├── AuthenticationError        → 401 Unauthorized
    ├── NotFoundError              → 404 Not Found
    ├── LockedOutError             → 429 Too Many Requests
    └── StorageError               → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class DumbPadError(Exception):
    """
    Base exception for all DumbPad application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def payload(self, request_id: str = "") -> Dict[str, Any]:
        """JSON error body; `context` is only included for client errors."""
        body: Dict[str, Any] = {
            "success": False,
            "error": self.error_code,
            "message": self.message,
        }
        if self.status_code < 500 and self.context:
            body["details"] = self.context
        body["request_id"] = request_id
        return body


class ValidationError(DumbPadError):
    """Client input failed a business-rule check."""

    status_code = 400
    error_code = "validation_error"

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


class PinFormatError(ValidationError):
    """
    The supplied PIN is missing or is not 4-10 decimal digits.

    Distinct from AuthenticationError: the client sent something that can
    never be a PIN, so no comparison was made.
    """

    error_code = "invalid_pin_format"

    def __init__(self, message: str = "Invalid PIN format"):
        super().__init__(message=message, field="pin")


class InvalidOperationError(DumbPadError):
    """The request is well-formed but not allowed (deleting the default notepad)."""

    status_code = 400
    error_code = "invalid_operation"

    def __init__(
        self,
        message: str = "Operation not allowed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(DumbPadError):
    """The supplied PIN is well-formed but does not match the configured PIN."""

    status_code = 401
    error_code = "unauthorized"

    def __init__(self, message: str = "Invalid PIN"):
        super().__init__(message=message)


class NotFoundError(DumbPadError):
    """
    Raised when a requested resource does not exist.

    When:    PUT/DELETE /api/notepads/{id} with an id missing from the registry.
    HTTP:    404 Not Found
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class LockedOutError(DumbPadError):
    """
    Raised when a client has too many failed PIN attempts inside the lockout window.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    status_code = 429
    error_code = "locked_out"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        minutes = max(1, (retry_after + 59) // 60)
        message = (
            f"Too many failed attempts. Please try again in about {minutes} minute(s)."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class StorageError(DumbPadError):
    """
    Raised when reading or writing the data directory fails.

    The message returned to the client is always generic. Paths and OS errors
    go into ``context`` and are only logged server-side.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
