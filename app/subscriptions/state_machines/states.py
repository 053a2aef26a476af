"""
State enums for subscription models.

These are Django TextChoices for database storage and admin integration.
UserSubscription.status is driven by django-fsm transitions.

UserSubscription States:
    pending → active (payment webhook reports success)
    active → expired (end_date passed, expiry sweep)
    pending → cancelled (abandoned: end_date passed without payment)

    Cancelling an active subscription does not change its status; it only
    turns off auto_renew (cancel at period end).

PaymentRecord States:
    pending → success | failed
"""

from django.db import models


class SubscriptionStatus(models.TextChoices):
    """
    States for the UserSubscription lifecycle.

    Terminal states: CANCELLED, EXPIRED
    """

    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    CANCELLED = "cancelled", "Cancelled"
    EXPIRED = "expired", "Expired"


class PaymentStatus(models.TextChoices):
    """States of a single entry in a subscription's payment history."""

    PENDING = "pending", "Pending"
    SUCCESS = "success", "Success"
    FAILED = "failed", "Failed"
