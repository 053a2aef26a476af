"""
Base exception classes for application-wide error handling.

Every domain error raised by a service inherits from BaseApplicationError so
views, the webhook endpoint and Celery tasks can treat failures uniformly:
each carries a human-readable message, a machine-readable error code, an
optional details dict, and the HTTP status it maps to.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Bad input or business rule violations (400)
    ├── AuthenticationError - Caller identity could not be established (401)
    ├── PermissionDeniedError - Authenticated but not allowed (403)
    ├── NotFoundError - Resource not found (404)
    ├── ConflictError - State conflicts, duplicates, stale writes (409)
    ├── RateLimitError - Rate limit exceeded (429)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import NotFoundError, ValidationError

    raise ValidationError(
        "Split percentages must add up to 100",
        error_code="INVALID_SPLIT",
        details={"platform": 30, "artist": 80},
    )

    # The DRF exception handler (core.exception_handler) renders these as:
    # {"error": "...", "error_code": "INVALID_SPLIT", "details": {...}}

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, amounts, versions)
        status_code: HTTP status used when the error reaches a view
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "Subscription plan not found",
                "error_code": "PLAN_NOT_FOUND",
                "details": {"plan_id": "9b0c..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails in the service layer.

    Use for:
    - Revenue splits that do not add up to 100
    - Zero or negative ledger amounts
    - Unsupported currencies
    - Malformed webhook payloads

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class AuthenticationError(BaseApplicationError):
    """
    Raised when the caller's identity cannot be verified.

    The main use is inbound webhooks: a payload whose HMAC signature does not
    match the shared provider secret is rejected with this error before any
    state is read or written.
    """

    default_error_code: str = "AUTHENTICATION_FAILED"
    status_code: int = 401


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when an authenticated user lacks permission for an operation.

    Example:
        if subscription.user_id != request.user.pk and not request.user.is_staff:
            raise PermissionDeniedError(
                "You can only manage your own subscriptions",
                error_code="NOT_SUBSCRIPTION_OWNER",
            )
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        plan = SubscriptionPlan.objects.filter(id=plan_id).first()
        if not plan:
            raise NotFoundError(
                f"Subscription plan {plan_id} not found",
                error_code="PLAN_NOT_FOUND",
                details={"plan_id": str(plan_id)},
            )

    Note:
        List queries return empty results instead of raising.
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - A second active subscription to the same artist
    - Insufficient wallet balance for a debit
    - Invalid state transitions
    - Optimistic locking failures
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409


class RateLimitError(BaseApplicationError):
    """
    Raised when rate limit is exceeded.

    Include retry_after in details when possible to help clients.
    """

    default_error_code: str = "RATE_LIMIT_EXCEEDED"
    status_code: int = 429


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Subclasses set is_retryable so callers (views, Celery tasks) can decide
    whether resubmitting the same request makes sense.

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    status_code: int = 502
    is_retryable: bool = False
