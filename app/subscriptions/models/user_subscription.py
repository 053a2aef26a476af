"""
UserSubscription and PaymentRecord models.

A UserSubscription is a user's time-bounded enrollment in an artist's plan.
Its payment history is a list of PaymentRecord rows, one per payment
attempt, matched to provider webhooks by transaction_id.

Usage:
    from subscriptions.models import PaymentRecord, UserSubscription

    subscription.activate()  # pending -> active
    subscription.save()
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from django_fsm import FSMField, transition

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.ledger.models import SupportedCurrency
from subscriptions.state_machines import PaymentStatus, SubscriptionStatus

# Placeholder stored until the provider returns the real reference.
PENDING_TRANSACTION_ID = "pending"


class UserSubscription(UUIDPrimaryKeyMixin, BaseModel):
    """
    A user's subscription to one artist through one plan.

    Uses django-fsm for status transitions and a version field for
    optimistic locking.

    State Flow:
        PENDING -> ACTIVE (successful payment webhook)
        ACTIVE -> EXPIRED (end_date passed)
        PENDING -> CANCELLED (abandoned, end_date passed without payment)

    Invariant:
        At most one ACTIVE row per (user, artist). Enforced by a partial
        unique constraint, so a concurrent second activation fails at the
        storage layer with IntegrityError.
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    plan = models.ForeignKey(
        "subscriptions.SubscriptionPlan",
        on_delete=models.PROTECT,
        related_name="subscriptions",
    )
    artist = models.ForeignKey(
        "artists.Artist",
        on_delete=models.PROTECT,
        related_name="subscriptions",
        help_text="Copied from plan.artist when the subscription is created",
    )

    # ==========================================================================
    # State and Period
    # ==========================================================================

    status = FSMField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.PENDING,
        db_index=True,
    )
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField()
    auto_renew = models.BooleanField(default=True)
    cancellation_date = models.DateTimeField(null=True, blank=True)
    last_renewal_date = models.DateTimeField(null=True, blank=True)
    next_renewal_date = models.DateTimeField(null=True, blank=True)

    version = models.PositiveIntegerField(
        default=1,
        help_text="Version for optimistic locking - incremented on each save",
    )

    class Meta:
        db_table = "user_subscriptions"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="user_subscr_user_id_5b7e2c_idx"),
            models.Index(fields=["status", "end_date"], name="user_subscr_status_a41d93_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "artist"],
                condition=Q(status=SubscriptionStatus.ACTIVE),
                name="unique_active_subscription_per_artist",
            ),
        ]

    def __str__(self) -> str:
        return f"UserSubscription(id={self.pk}, status={self.status})"

    def save(self, *args, **kwargs):
        """
        Save with version auto-increment for optimistic locking.
        """
        is_update = not self._state.adding
        if is_update:
            self.version = F("version") + 1
            update_fields = kwargs.get("update_fields")
            if update_fields is not None:
                kwargs["update_fields"] = {*update_fields, "version", "updated_at"}
        super().save(*args, **kwargs)
        if is_update:
            self.refresh_from_db(fields=["version"])

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=SubscriptionStatus.PENDING,
        target=SubscriptionStatus.ACTIVE,
    )
    def activate(self):
        """Mark the subscription active after its payment succeeded."""
        now = timezone.now()
        self.last_renewal_date = now
        self.next_renewal_date = self.end_date

    @transition(
        field=status,
        source=SubscriptionStatus.ACTIVE,
        target=SubscriptionStatus.EXPIRED,
    )
    def expire(self):
        """End an active subscription whose period is over."""
        self.auto_renew = False
        self.next_renewal_date = None

    @transition(
        field=status,
        source=SubscriptionStatus.PENDING,
        target=SubscriptionStatus.CANCELLED,
    )
    def abandon(self):
        """Close a pending subscription that was never paid."""
        self.auto_renew = False
        if self.cancellation_date is None:
            self.cancellation_date = timezone.now()

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def is_cancelled_at_period_end(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE and not self.auto_renew


class PaymentRecord(UUIDPrimaryKeyMixin, BaseModel):
    """
    One entry in a subscription's payment history.

    transaction_id holds the provider reference. It starts as the
    PENDING_TRANSACTION_ID placeholder and is unique once replaced.
    """

    subscription = models.ForeignKey(
        UserSubscription,
        on_delete=models.CASCADE,
        related_name="payment_history",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, choices=SupportedCurrency.choices)
    payment_method = models.CharField(max_length=50)
    transaction_id = models.CharField(max_length=255, db_index=True)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "subscription_payments"
        ordering = ["timestamp", "created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["transaction_id"],
                condition=~Q(transaction_id=PENDING_TRANSACTION_ID),
                name="unique_payment_transaction_id",
            ),
        ]

    def __str__(self) -> str:
        return f"PaymentRecord({self.transaction_id}, {self.status})"
