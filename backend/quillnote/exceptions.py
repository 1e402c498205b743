"""
Quillnote Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the different error scenarios.
Why:   Targeted handling with the right HTTP status code and a message that
       never leaks internal details to the client.
How:   Each exception carries a message and an optional context dict.
       Global handlers (registered in main.py) turn them into JSON responses.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    QuillnoteError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── ConfigurationError       → 500 Internal Server Error (operator must fix)
    ├── DatabaseError            → 500 Internal Server Error
    ├── LLMServiceError          → 503 Service Unavailable (retry later)
    └── CircuitBreakerOpenError  → 503 Service Unavailable (circuit open)
"""

from typing import Any, Dict, Optional


class QuillnoteError(Exception):
    """
    Base exception for all Quillnote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuillnoteError):
    """
    Raised when client input fails a business rule.

    When:    Missing or blank title/content, title too long, unknown sort order.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, malformed UUIDs) are still
    answered by FastAPI itself with 422.
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


class NotFoundError(QuillnoteError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; the service layer converts
    that into this exception so routes stay free of status-code logic.
    """

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


class ConfigurationError(QuillnoteError):
    """
    Raised when the server is missing configuration needed for a request.

    When:    Summarization requested but the provider API key is empty,
             or LLM_PROVIDER names a provider we do not ship.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The server is not configured for this operation.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LLMServiceError(QuillnoteError):
    """
    Raised when the summarization provider fails after all retries.

    HTTP:    503 Service Unavailable

    retry_after is forwarded as a Retry-After header when present.
    """

    def __init__(
        self,
        message: str = "AI summarization service is temporarily unavailable",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(QuillnoteError):
    """
    Raised when the circuit breaker is in OPEN state.

    How circuit breaker works:
        CLOSED (normal) → failures increment counter
        → After N failures → OPEN (reject all calls for the recovery timeout)
        → After the timeout → HALF-OPEN (allow one test call)
        → If test succeeds → CLOSED
        → If test fails → OPEN again
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"AI service is temporarily unavailable due to repeated failures. "
            f"The service will automatically retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(QuillnoteError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; SQL and
    constraint details are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(QuillnoteError):
    """Raised when a client exceeds the per-IP request rate limit (HTTP 429)."""

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
