"""
State machine enums for subscription models.
"""

from subscriptions.state_machines.states import PaymentStatus, SubscriptionStatus

__all__ = [
    "PaymentStatus",
    "SubscriptionStatus",
]
