"""
Artist model.

An Artist owns subscription plans and receives the artist share of every
successful subscription payment in its embedded wallet.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Artist(UUIDPrimaryKeyMixin, BaseModel):
    """
    A music artist that fans can subscribe to.

    Fields:
        user: Account allowed to manage the artist's plans (optional)
        name: Public artist name
        wallet_balance: Accumulated artist share of subscription revenue

    Note:
        wallet_balance is only changed through ArtistWalletService, which
        issues a single UPDATE with an F() expression.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="artist",
        help_text="Account that manages this artist",
    )
    name = models.CharField(max_length=200, help_text="Public artist name")
    wallet_balance = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Artist wallet balance (never negative)",
    )

    class Meta:
        db_table = "artists"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(wallet_balance__gte=0),
                name="artist_wallet_balance_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def is_managed_by(self, user) -> bool:
        """True when the user may manage this artist's plans."""
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or self.user_id == user.pk
