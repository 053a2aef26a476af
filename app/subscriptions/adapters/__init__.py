"""
Adapters for external services.

All payment provider calls go through PaymentProviderAdapter to ensure
consistent timeouts, error handling and observability.
"""

from subscriptions.adapters.payment_provider import (
    InitializeTransactionParams,
    InitializeTransactionResult,
    PaymentProviderAdapter,
)

__all__ = [
    "InitializeTransactionParams",
    "InitializeTransactionResult",
    "PaymentProviderAdapter",
]
