"""
Storefront API — Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Each exception carries its error kind and HTTP status, so one global
       handler (registered in main.py) renders every failure the same way.
How:   Each exception class carries a message, an optional context dict and
       optional response headers.
Who:   Raised by services and request guards; caught by global handlers.

Exception Hierarchy:
    StorefrontError (base)       → 500 internal_error
    ├── ValidationError          → 400 validation_error
    ├── NotFoundError            → 404 not_found
    ├── UnauthorizedError        → 401 unauthorized
    │   └── InvalidCredentialsError
    ├── RateLimitExceededError   → 429 rate_limit_exceeded
    └── StoreError               → 500 store_error

Response body (all kinds):
    {
        "error": "<kind>",
        "message": "...",
        "details": {...},
        "request_id": "a1b2c3d4"
    }
"""

from typing import Any, Dict, Optional


class StorefrontError(Exception):
    """
    Base exception for all Storefront application errors.

    Attributes:
        message:  User-facing error description
        context:  Extra detail returned as `details` in the response
        headers:  Extra response headers (Retry-After, WWW-Authenticate)
    """

    kind = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.headers = headers or {}
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """
    Raised when client input fails validation.

    HTTP: 400 Bad Request. Request bodies are otherwise only checked for
    shape by the schemas; everything else is left to the store's constraints.
    """

    kind = "validation_error"
    status_code = 400

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


class NotFoundError(StorefrontError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records (not an exception); the
    service layer converts that None into this exception. Also raised for a
    search that matched nothing.
    """

    kind = "not_found"
    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found!"
            if resource_id is not None:
                message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class UnauthorizedError(StorefrontError):
    """
    Raised when a request lacks a currently valid token.

    Missing, malformed, expired, unknown and revoked tokens all map here.
    HTTP: 401 Unauthorized with a WWW-Authenticate challenge.
    """

    kind = "unauthorized"
    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=message,
            context=ctx,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.reason = reason


class InvalidCredentialsError(UnauthorizedError):
    """
    Raised by login when the username/password pair does not match.

    The message is identical whether the username or the password was wrong.
    """

    def __init__(self):
        super().__init__(
            message="Invalid username or password",
            reason="invalid_credentials",
        )


class RateLimitExceededError(StorefrontError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests, with a Retry-After header holding the
    seconds left in the client's current window.
    """

    kind = "rate_limit_exceeded"
    status_code = 429

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests, please try again after {retry_after} seconds"
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(
            message=message,
            context=ctx,
            headers={"Retry-After": str(retry_after)},
        )
        self.retry_after = retry_after


class StoreError(StorefrontError):
    """
    Raised when a database operation fails for any reason other than a
    missing record (constraint violation, lost connection, bad value).

    HTTP: 500. The underlying error type and message travel in `context`;
    whether they reach the client is decided by `settings.expose_store_errors`.
    """

    kind = "store_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        original: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if original is not None:
            ctx["type"] = type(original).__name__
            ctx["detail"] = str(original)
        super().__init__(message=message, context=ctx)
        self.original = original
