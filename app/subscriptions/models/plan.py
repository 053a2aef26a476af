"""
SubscriptionPlan model.

A plan is an artist-defined subscription tier: price, duration and the
revenue split between artist and platform. Plans are soft-disabled through
is_active and never hard-deleted while subscriptions reference them.

Usage:
    from subscriptions.models import SubscriptionPlan

    plan = SubscriptionPlan.objects.create(
        artist=artist,
        name="Gold",
        price_amount=Decimal("9.99"),
        price_currency="USD",
        duration_days=30,
        split_platform_percent=20,
        split_artist_percent=80,
    )
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from subscriptions.ledger.models import SupportedCurrency
from subscriptions.ledger.types import Money, RevenueSplit

DEFAULT_DURATION_DAYS = 30
DEFAULT_PLATFORM_PERCENT = 20
DEFAULT_ARTIST_PERCENT = 80


class SubscriptionPlan(UUIDPrimaryKeyMixin, BaseModel):
    """
    A subscription tier offered by an artist.

    Fields:
        artist: Owning artist
        name / description / benefits: Display data
        price_amount / price_currency: Price per period
        duration_days: Length of one subscription period
        split_platform_percent / split_artist_percent: Revenue split (sum 100)
        is_active: Whether new subscriptions are accepted
        subscriber_count: Incremented on every successful subscribe()
    """

    artist = models.ForeignKey(
        "artists.Artist",
        on_delete=models.PROTECT,
        related_name="plans",
        help_text="Artist offering this plan",
    )
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True, default="")
    price_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Price per subscription period",
    )
    price_currency = models.CharField(
        max_length=3,
        choices=SupportedCurrency.choices,
        default=SupportedCurrency.USD,
    )
    benefits = models.JSONField(
        default=list,
        blank=True,
        help_text="List of benefit descriptions shown to fans",
    )
    duration_days = models.PositiveIntegerField(
        default=DEFAULT_DURATION_DAYS,
        validators=[MinValueValidator(1)],
        help_text="Length of one subscription period in days",
    )
    split_platform_percent = models.PositiveSmallIntegerField(
        default=DEFAULT_PLATFORM_PERCENT,
        validators=[MaxValueValidator(100)],
    )
    split_artist_percent = models.PositiveSmallIntegerField(
        default=DEFAULT_ARTIST_PERCENT,
        validators=[MaxValueValidator(100)],
    )
    is_active = models.BooleanField(default=True, db_index=True)
    subscriber_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "subscription_plans"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["artist", "is_active"], name="subscriptio_artist__8d2a41_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(split_artist_percent=100 - F("split_platform_percent")),
                name="plan_split_sums_to_100",
            ),
            models.CheckConstraint(
                condition=Q(price_amount__gte=0),
                name="plan_price_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(duration_days__gte=1),
                name="plan_duration_at_least_one_day",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"

    @property
    def price(self) -> Money:
        return Money(amount=self.price_amount, currency=self.price_currency)

    @property
    def revenue_split(self) -> RevenueSplit:
        """Artist and platform shares of one period's price."""
        return RevenueSplit.calculate(
            self.price_amount,
            platform_percent=self.split_platform_percent,
            artist_percent=self.split_artist_percent,
        )

    @property
    def amount_minor_units(self) -> int:
        """Price in the currency's smallest unit, as payment providers expect."""
        return int(self.price_amount * 100)
