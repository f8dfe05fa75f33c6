"""
DevConnect Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every error scenario the API surfaces.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by services and dependencies; caught by global handlers.
When:  During request processing when a caller-input or state error occurs.

Exception Hierarchy:
    DevConnectError (base)
    ├── ValidationError          → 400 Bad Request
    ├── SelfReferenceError       → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── DatabaseError            → 500 Internal Server Error

None of these are retried: they describe the caller's input or the current
state of the data, not transient faults.
"""

from typing import Any, Dict, Optional


class DevConnectError(Exception):
    """
    Base exception for all DevConnect application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only partially returned)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DevConnectError):
    """
    Raised when client input fails a business rule.

    When:    Malformed email, weak password, disallowed profile field,
             too many skills, unsupported connection status.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, malformed UUID path params) are
    still reported by FastAPI itself as 422.
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


class SelfReferenceError(DevConnectError):
    """Raised when an account tries to send a connection request to itself."""

    def __init__(
        self,
        message: str = "Cannot send a connection request to yourself",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DevConnectError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown receiver account, or a review target that is missing,
             addressed to someone else, or no longer in the reviewable state.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the handler can answer with the right status code.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(DevConnectError):
    """
    Raised when a connection request already exists for a pair of accounts.

    Direction and status of the existing request do not matter: the pair
    {A, B} may only ever hold one request.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Connection request already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(DevConnectError):
    """
    Raised when the caller cannot be identified.

    When:    Missing, malformed or expired token; token for a deleted account;
             wrong email/password on login.
    HTTP:    401 Unauthorized

    Verification fails closed: there is never a fallback identity.
    """

    def __init__(
        self,
        message: str = "Authentication required. Please log in.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(DevConnectError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic; details
    (statement, constraint name) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DevConnectError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
