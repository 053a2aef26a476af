"""
Subscription domain models.

- SubscriptionPlan: Artist-defined subscription tier
- UserSubscription: A user's enrollment in a plan
- PaymentRecord: Payment history entry of a subscription
- PlatformWallet / WalletTransaction: Platform ledger (subscriptions.ledger)
"""

from subscriptions.ledger.models import (
    PlatformWallet,
    SupportedCurrency,
    WalletTransaction,
    WalletTransactionType,
)
from subscriptions.models.plan import SubscriptionPlan
from subscriptions.models.user_subscription import (
    PENDING_TRANSACTION_ID,
    PaymentRecord,
    UserSubscription,
)

__all__ = [
    "PENDING_TRANSACTION_ID",
    "PaymentRecord",
    "PlatformWallet",
    "SubscriptionPlan",
    "SupportedCurrency",
    "UserSubscription",
    "WalletTransaction",
    "WalletTransactionType",
]
