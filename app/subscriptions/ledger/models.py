"""
Platform wallet ledger models.

One PlatformWallet row per currency holds the platform's share of
subscription revenue. Every balance change appends exactly one
WalletTransaction row. Rows are only written through WalletLedgerService.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class SupportedCurrency(models.TextChoices):
    """Currencies the platform can price plans and hold balances in."""

    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"
    GBP = "GBP", "British Pound"
    NGN = "NGN", "Nigerian Naira"
    GHS = "GHS", "Ghanaian Cedi"
    KES = "KES", "Kenyan Shilling"
    ZAR = "ZAR", "South African Rand"


class WalletTransactionType(models.TextChoices):
    SUBSCRIPTION = "subscription", "Subscription"
    WITHDRAWAL = "withdrawal", "Withdrawal"
    REFUND = "refund", "Refund"


class PlatformWallet(UUIDPrimaryKeyMixin, BaseModel):
    """
    Platform balance for a single currency.

    Fields:
        currency: ISO 4217 code, one wallet per currency
        balance: Current balance, never negative (database CHECK)
        version: Incremented by every credit and debit
    """

    currency = models.CharField(
        max_length=3,
        unique=True,
        choices=SupportedCurrency.choices,
    )
    balance = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        default=Decimal("0"),
    )
    version = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "platform_wallets"
        ordering = ["currency"]
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name="platform_wallet_balance_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"PlatformWallet({self.currency}: {self.balance})"


class WalletTransaction(UUIDPrimaryKeyMixin, models.Model):
    """
    Append-only record of a platform wallet balance change.

    amount is signed: credits are positive, debits negative, so the sum of
    a wallet's transactions equals its balance.
    """

    wallet = models.ForeignKey(
        PlatformWallet,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    amount = models.DecimalField(max_digits=20, decimal_places=4)
    currency = models.CharField(max_length=3, choices=SupportedCurrency.choices)
    type = models.CharField(max_length=20, choices=WalletTransactionType.choices)
    description = models.CharField(max_length=255, blank=True, default="")
    reference = models.CharField(
        max_length=255,
        blank=True,
        default="",
        db_index=True,
        help_text="External reference (provider transaction id, withdrawal id)",
    )
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "platform_wallet_transactions"
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["wallet", "-timestamp"], name="platform_wa_wallet__3c1f0e_idx"),
        ]

    def __str__(self) -> str:
        return f"WalletTransaction({self.type} {self.amount} {self.currency})"
