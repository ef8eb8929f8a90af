"""
ShipTrack Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions raised by services and dependencies.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) translate them into
       structured JSON responses with the matching HTTP status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    ShipTrackError (base)
    ├── ValidationError              → 400 Bad Request (field-level errors)
    ├── AuthenticationRequiredError  → 401 Unauthorized
    ├── NotFoundError                → 404 Not Found
    ├── DatabaseError                → 500 Internal Server Error
    └── RateLimitExceededError       → 429 Too Many Requests

Services signal "absent" with NotFoundError instead of returning None, so
route handlers stay free of status-code branching.
"""

from typing import Any, Dict, List, Optional


class ShipTrackError(Exception):
    """
    Base exception for all ShipTrack application errors.

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


class ValidationError(ShipTrackError):
    """
    Raised when client input breaks a domain rule.

    Carries field-level messages in the same shape the dashboard already
    renders for form errors:

        {
            "error": "validation_error",
            "message": "Validation failed",
            "errors": {"title": ["The title field is required."]},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        errors: Dict[str, List[str]],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Shortcut for the common single-field case."""
        return cls(errors={field: [message]})


class AuthenticationRequiredError(ShipTrackError):
    """
    Raised when an actor-scoped endpoint is called without an identity.

    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication is required for this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ShipTrackError):
    """
    Raised when a single-record lookup or update targets a missing id.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(ShipTrackError):
    """
    Raised when the storage layer fails unexpectedly (connection loss, etc).

    HTTP: 500 Internal Server Error

    The message returned to the client is always generic. Query text and
    driver errors only go to the server log via `context`.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(ShipTrackError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests (with Retry-After header)
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
