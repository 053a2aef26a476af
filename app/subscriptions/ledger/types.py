"""
Data types for ledger operations.

Types:
    Money: A decimal amount with its currency
    RevenueSplit: Artist and platform shares of a payment

Usage:
    from subscriptions.ledger.types import RevenueSplit

    split = RevenueSplit.calculate(Decimal("9.99"), platform_percent=20, artist_percent=80)
    split.artist_amount    # Decimal("7.992")
    split.platform_amount  # Decimal("1.998")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Money:
    """
    Represents a monetary amount.

    Amounts are Decimals in the currency's major unit. Splits can produce
    fractions of a cent (9.99 * 80 / 100 = 7.992), which the ledger keeps
    exactly instead of rounding.
    """

    amount: Decimal
    currency: str = "USD"

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )
        return Money(amount=self.amount + other.amount, currency=self.currency)


@dataclass(frozen=True)
class RevenueSplit:
    """Artist and platform shares of one payment."""

    artist_amount: Decimal
    platform_amount: Decimal

    @classmethod
    def calculate(
        cls,
        price: Decimal,
        platform_percent: int,
        artist_percent: int,
    ) -> RevenueSplit:
        """
        Split price by percentage using exact decimal arithmetic.

        Raises:
            ValueError: If the percentages do not add up to 100
        """
        if platform_percent + artist_percent != 100:
            raise ValueError(
                f"Split percentages must sum to 100, got "
                f"{platform_percent} + {artist_percent}"
            )
        price = Decimal(price)
        return cls(
            artist_amount=price * artist_percent / 100,
            platform_amount=price * platform_percent / 100,
        )
