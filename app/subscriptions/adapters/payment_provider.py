"""
Payment provider API adapter.

This module provides the PaymentProviderAdapter class which encapsulates
all calls to the hosted payment provider (a Paystack-style API). All
provider calls should go through this adapter to ensure consistent
timeouts, error handling and observability.

Features:
- Bounded timeout on every HTTP call
- Automatic error translation to domain exceptions with is_retryable
- Structured logging with timing metrics
- HMAC-SHA512 webhook signature verification with constant-time compare

Configuration (via settings):
- PAYMENT_PROVIDER_SECRET_KEY: API secret, also the webhook signing key
- PAYMENT_PROVIDER_BASE_URL: API base URL
- PAYMENT_PROVIDER_TIMEOUT_SECONDS: Per-request timeout (default: 10)
- PAYMENT_PROVIDER_CALLBACK_URL: Where the provider redirects after checkout

Usage:
    from subscriptions.adapters import InitializeTransactionParams, PaymentProviderAdapter

    result = PaymentProviderAdapter.initialize_transaction(
        InitializeTransactionParams(
            email="fan@example.com",
            amount_minor_units=999,
            currency="USD",
            metadata={"subscription_id": str(subscription.id)},
        )
    )
    result.reference          # "7PVGX8MEk85tgeEpVDtD"
    result.authorization_url  # "https://checkout.paystack.com/0peioxfhpn"
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import requests
from django.conf import settings

from subscriptions.exceptions import (
    PaymentProviderError,
    PaymentProviderUnavailableError,
    WebhookSignatureError,
)

if TYPE_CHECKING:
    from typing import Any, NoReturn


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class InitializeTransactionParams:
    """
    Parameters for starting a hosted checkout.

    Attributes:
        email: Payer email, shown on the checkout page
        amount_minor_units: Amount in the currency's smallest unit (cents, kobo)
        currency: ISO 4217 currency code
        metadata: Key-value pairs echoed back in webhooks
    """

    email: str
    amount_minor_units: int
    currency: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.amount_minor_units < 0:
            raise ValueError("amount_minor_units cannot be negative")
        if not self.email:
            raise ValueError("email is required")
        if not self.currency:
            raise ValueError("currency is required")


@dataclass
class InitializeTransactionResult:
    """
    Result of a successful initialization.

    Attributes:
        reference: Provider transaction reference, later sent in webhooks
        authorization_url: Checkout URL the client is redirected to
        access_code: Provider access code for inline checkout
        raw_response: Full provider response (for debugging)
    """

    reference: str
    authorization_url: str
    access_code: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Adapter
# =============================================================================


class PaymentProviderAdapter:
    """
    Adapter for payment provider API operations.

    All methods are classmethods; the adapter holds no state between calls,
    so it is safe to use from web workers and Celery tasks alike.
    """

    SIGNATURE_HEADER = "X-Provider-Signature"

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @staticmethod
    def _headers() -> dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.PAYMENT_PROVIDER_SECRET_KEY}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _url(path: str) -> str:
        return f"{settings.PAYMENT_PROVIDER_BASE_URL.rstrip('/')}/{path.lstrip('/')}"

    # =========================================================================
    # Core Operations
    # =========================================================================

    @classmethod
    def initialize_transaction(
        cls,
        params: InitializeTransactionParams,
    ) -> InitializeTransactionResult:
        """
        Start a hosted checkout with the provider.

        Returns:
            InitializeTransactionResult with reference and authorization URL

        Raises:
            PaymentProviderUnavailableError: Timeout, connection error, 5xx or 429
            PaymentProviderError: Rejected request or malformed response
        """
        logger = cls.get_logger()

        log_context = {
            "operation": "initialize_transaction",
            "amount_minor_units": params.amount_minor_units,
            "currency": params.currency,
        }

        payload: dict[str, Any] = {
            "email": params.email,
            "amount": params.amount_minor_units,
            "currency": params.currency,
            "metadata": params.metadata,
        }
        callback_url = getattr(settings, "PAYMENT_PROVIDER_CALLBACK_URL", "")
        if callback_url:
            payload["callback_url"] = callback_url

        start_time = time.time()
        logger.info("Starting payment provider operation", extra=log_context)

        try:
            response = requests.post(
                cls._url("/transaction/initialize"),
                json=payload,
                headers=cls._headers(),
                timeout=settings.PAYMENT_PROVIDER_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            duration_ms = (time.time() - start_time) * 1000
            cls._handle_request_error(e, log_context, duration_ms)

        duration_ms = (time.time() - start_time) * 1000
        body = cls._parse_response(response, log_context, duration_ms)

        data = body.get("data") or {}
        if not isinstance(data, dict):
            logger.error(
                "Payment provider response has malformed data",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise PaymentProviderError(
                "Payment provider returned a malformed response",
                provider_status=response.status_code,
            )
        reference = data.get("reference")
        authorization_url = data.get("authorization_url")
        if not reference or not authorization_url:
            logger.error(
                "Payment provider response missing reference",
                extra={**log_context, "duration_ms": duration_ms},
            )
            raise PaymentProviderError(
                "Payment provider returned an incomplete response",
                provider_status=response.status_code,
            )

        logger.info(
            "Payment provider operation completed",
            extra={
                **log_context,
                "reference": reference,
                "duration_ms": duration_ms,
            },
        )

        return InitializeTransactionResult(
            reference=reference,
            authorization_url=authorization_url,
            access_code=data.get("access_code"),
            raw_response=body,
        )

    # =========================================================================
    # Webhooks
    # =========================================================================

    @staticmethod
    def compute_signature(payload: bytes) -> str:
        """HMAC-SHA512 hex digest of the raw payload with the provider secret."""
        return hmac.new(
            settings.PAYMENT_PROVIDER_SECRET_KEY.encode("utf-8"),
            payload,
            hashlib.sha512,
        ).hexdigest()

    @classmethod
    def verify_webhook_signature(cls, payload: bytes, signature: str | None) -> None:
        """
        Verify a webhook signature over the exact raw request body.

        Args:
            payload: Raw webhook body bytes, as received
            signature: Value of the X-Provider-Signature header

        Raises:
            WebhookSignatureError: Missing or mismatched signature
        """
        if not signature:
            raise WebhookSignatureError(
                "Missing webhook signature",
                error_code="MISSING_SIGNATURE",
            )

        expected = cls.compute_signature(payload)
        if not hmac.compare_digest(
            expected.encode("ascii"),
            signature.strip().lower().encode("utf-8"),
        ):
            cls.get_logger().warning(
                "Webhook signature mismatch",
                extra={"payload_bytes": len(payload)},
            )
            raise WebhookSignatureError("Invalid webhook signature")

    # =========================================================================
    # Error Handling
    # =========================================================================

    @classmethod
    def _parse_response(
        cls,
        response: requests.Response,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> dict[str, Any]:
        """
        Decode a provider response and translate failures.

        Raises:
            PaymentProviderUnavailableError: 5xx or 429
            PaymentProviderError: Other non-2xx, invalid JSON, or status false
        """
        logger = cls.get_logger()
        log_context = {
            **log_context,
            "duration_ms": duration_ms,
            "provider_status": response.status_code,
        }

        try:
            body = response.json()
        except ValueError:
            body = {}

        message = body.get("message") if isinstance(body, dict) else None

        if response.status_code >= 500 or response.status_code == 429:
            logger.warning("Payment provider unavailable", extra=log_context)
            raise PaymentProviderUnavailableError(
                message or "Payment provider is temporarily unavailable",
                provider_status=response.status_code,
            )

        if response.status_code >= 400:
            logger.error("Payment provider rejected request", extra=log_context)
            raise PaymentProviderError(
                message or "Payment provider rejected the request",
                provider_status=response.status_code,
            )

        if not isinstance(body, dict) or body.get("status") is not True:
            logger.error("Payment provider returned unsuccessful status", extra=log_context)
            raise PaymentProviderError(
                message or "Payment provider returned an invalid response",
                provider_status=response.status_code,
            )

        return body

    @classmethod
    def _handle_request_error(
        cls,
        error: requests.RequestException,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> NoReturn:
        """
        Translate transport-level requests errors to domain exceptions.

        Raises:
            PaymentProviderUnavailableError: Timeout or connection failure
            PaymentProviderError: Any other requests failure
        """
        logger = cls.get_logger()
        log_context = {
            **log_context,
            "duration_ms": duration_ms,
            "error_type": type(error).__name__,
        }

        if isinstance(error, requests.Timeout):
            logger.warning("Payment provider request timed out", extra=log_context)
            raise PaymentProviderUnavailableError(
                "Payment provider request timed out",
                error_code="PAYMENT_PROVIDER_TIMEOUT",
            ) from error

        if isinstance(error, requests.ConnectionError):
            logger.warning("Could not connect to payment provider", extra=log_context)
            raise PaymentProviderUnavailableError(
                "Could not connect to payment provider",
            ) from error

        logger.error("Payment provider request failed", extra=log_context, exc_info=True)
        raise PaymentProviderError(
            "Payment provider request failed",
            details={"error": str(error)},
        ) from error
