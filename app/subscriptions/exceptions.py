"""
Subscription-specific exceptions.

Exception Hierarchy:
    SubscriptionNotFoundError (NotFoundError, 404)
    PlanNotFoundError (NotFoundError, 404)
    UserNotFoundError (NotFoundError, 404)
    InvalidSplitError (ValidationError, 400)
    InvalidWebhookPayloadError (ValidationError, 400)
    AlreadySubscribedError (ConflictError, 409)
    PlanInactiveError (ConflictError, 409)
    StaleRecordError (ConflictError, 409) - Optimistic locking conflict
    InvalidStateTransitionError (ConflictError, 409) - FSM transition not allowed
    WebhookSignatureError (AuthenticationError, 401)
    PaymentProviderError (ExternalServiceError, 502)
    ├── PaymentProviderUnavailableError - Timeout/connection failure (retryable)
    └── PaymentInitiationFailedError - subscribe() aborted and compensated

Usage:
    from subscriptions.exceptions import AlreadySubscribedError

    raise AlreadySubscribedError(
        "User already has an active subscription to this artist",
        details={"user_id": user.pk, "artist_id": str(artist_id)},
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import (
    AuthenticationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Lookup Failures
# =============================================================================


class SubscriptionNotFoundError(NotFoundError):
    """
    Raised when a subscription cannot be located.

    For webhooks this means the reference matches no payment history
    entry: either a replay for an unknown transaction or a data gap.
    The provider should not keep retrying it.
    """

    default_error_code: str = "SUBSCRIPTION_NOT_FOUND"


class PlanNotFoundError(NotFoundError):
    default_error_code: str = "PLAN_NOT_FOUND"


class UserNotFoundError(NotFoundError):
    default_error_code: str = "USER_NOT_FOUND"


# =============================================================================
# Validation
# =============================================================================


class InvalidSplitError(ValidationError):
    """Raised when platform + artist split percentages do not sum to 100."""

    default_error_code: str = "INVALID_SPLIT"


class InvalidWebhookPayloadError(ValidationError):
    """Raised when a signed webhook body is not the expected JSON shape."""

    default_error_code: str = "INVALID_WEBHOOK_PAYLOAD"


# =============================================================================
# State Conflicts
# =============================================================================


class AlreadySubscribedError(ConflictError):
    """
    Raised when a user already holds an active subscription to the artist.

    Raised both by the pre-check in subscribe() and when activation trips
    the partial unique constraint on (user, artist, status=active).
    """

    default_error_code: str = "ALREADY_SUBSCRIBED"


class PlanInactiveError(ConflictError):
    """Raised when subscribing to a plan that has been deactivated."""

    default_error_code: str = "PLAN_INACTIVE"


class StaleRecordError(ConflictError):
    """
    Raised when optimistic locking detects concurrent modification.

    The record was modified by another process between read and update.
    The caller should reload and retry, or abort.

    Attributes:
        details: Contains pk, expected_version, and current_version
    """

    default_error_code: str = "STALE_RECORD"


class InvalidStateTransitionError(ConflictError):
    """
    Raised when a django-fsm transition is not allowed from the current state.

    Example:
        raise InvalidStateTransitionError(
            "Cannot activate subscription in 'expired' state",
            details={"current_state": "expired", "target_state": "active"},
        )
    """

    default_error_code: str = "INVALID_STATE_TRANSITION"


# =============================================================================
# Authentication
# =============================================================================


class WebhookSignatureError(AuthenticationError):
    """Raised when a webhook's HMAC signature is missing or does not match."""

    default_error_code: str = "INVALID_SIGNATURE"


# =============================================================================
# Payment Provider Errors
# =============================================================================


class PaymentProviderError(ExternalServiceError):
    """
    Base exception for payment provider failures.

    Attributes:
        provider_status: HTTP status returned by the provider, if any
        is_retryable: Whether the same request may succeed if resubmitted
    """

    default_error_code: str = "PAYMENT_PROVIDER_ERROR"
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_status: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if provider_status is not None:
            details["provider_status"] = provider_status
        super().__init__(message, error_code=error_code, details=details)
        self.provider_status = provider_status


class PaymentProviderUnavailableError(PaymentProviderError):
    """
    The provider could not be reached or did not answer in time.

    Covers timeouts, connection errors and provider 5xx responses.
    """

    default_error_code: str = "PAYMENT_PROVIDER_UNAVAILABLE"
    is_retryable: bool = True


class PaymentInitiationFailedError(PaymentProviderError):
    """
    Raised by subscribe() after the pending subscription was rolled back.

    No subscription or payment record is left behind, so the client can
    simply call subscribe() again. is_retryable mirrors the provider error
    that caused it.
    """

    default_error_code: str = "PAYMENT_INITIATION_FAILED"
