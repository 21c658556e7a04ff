"""
Journeo Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for every failure a request can end in.
How:   Each exception class carries a user-safe message, an optional context
       dict (logged, never returned), its HTTP status code and its error label.
       One boundary handler in main.py renders all of them as
       {status, error, message, path}.
Who:   Raised by services, dependencies and middleware.

Exception Hierarchy:
    JourneoError (base)                    → 500 Internal Server Error
    ├── NotFoundError                      → 404 Not Found
    ├── ConflictError                      → 409 Conflict
    ├── ValidationError                    → 400 Validation Failed
    ├── InvalidArgumentError               → 400 Bad Request
    ├── AccessDeniedError                  → 403 Forbidden
    ├── UnauthenticatedError               → 401 Unauthorized
    │   └── InvalidCredentialsError        → 401 Unauthorized
    ├── RateLimitExceededError             → 429 Too Many Requests
    ├── DatabaseError                      → 500 Internal Server Error
    └── FileStorageError                   → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class JourneoError(Exception):
    """
    Base exception for all Journeo application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(JourneoError):
    """
    Raised when a requested entity does not exist.

    SQLAlchemy returns None for missing rows; services convert that None into
    this exception so the boundary handler can answer 404.
    """

    status_code = 404
    error = "Not Found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} not found with id: {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(JourneoError):
    """Raised when a write would violate a uniqueness rule (duplicate email)."""

    status_code = 409
    error = "Conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(JourneoError):
    """
    Raised when client input fails field-level validation.

    Used both by services (the rating range, password length) and by
    the request-validation handler that reformats FastAPI's own errors.
    """

    status_code = 400
    error = "Validation Failed"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
            message = f"{field}: {message}"
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidArgumentError(JourneoError):
    """
    Raised for malformed input that is not a simple field constraint:
    an unknown enum value, an unsupported sort field, a path-escaping file name.
    """

    status_code = 400
    error = "Bad Request"

    def __init__(
        self,
        message: str = "Invalid argument",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AccessDeniedError(JourneoError):
    """
    Raised when an authenticated caller is not allowed to perform an action.

    Covers both gates: a USER calling an ADMIN-only operation, and a USER
    reading a guide they are not assigned to. A missing guide is NOT this
    error; existence is always checked first and yields NotFoundError.
    """

    status_code = 403
    error = "Forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthenticatedError(JourneoError):
    """Raised when a request carries no valid bearer token."""

    status_code = 401
    error = "Unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(UnauthenticatedError):
    """
    Raised by login for an unknown email or a wrong password.

    Both cases share one message so the response cannot be used to probe
    which emails are registered.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid email or password", context=context)


class RateLimitExceededError(JourneoError):
    """Raised when a client exceeds the login attempt window."""

    status_code = 429
    error = "Too Many Requests"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many login attempts. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class DatabaseError(JourneoError):
    """
    Raised when a database operation fails unexpectedly.

    The message returned to the client is always generic; driver details
    go to `context` and the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(JourneoError):
    """Raised when the media directory cannot be written or read."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def error_payload(status_code: int, error: str, message: str, path: str) -> Dict[str, Any]:
    """The uniform JSON body of every non-2xx response."""
    return {
        "status": status_code,
        "error": error,
        "message": message,
        "path": path,
    }
