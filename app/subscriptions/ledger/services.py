"""
Ledger service layer for platform wallet operations.

WalletLedgerService is the only code allowed to change PlatformWallet
balances. Calling code never assigns balance directly; it calls credit()
or debit(), which keep these invariants:

- balance is never negative
- every balance change appends exactly one WalletTransaction
- updates are atomic per currency: credit is an unconditional increment,
  debit is a single conditional decrement (no read-then-write gap)

Usage:
    from subscriptions.ledger import ledger, WalletTransactionType

    ledger.credit(
        "USD",
        Decimal("1.998"),
        WalletTransactionType.SUBSCRIPTION,
        "Platform share of subscription payment",
        reference="ref_123",
    )
    balance = ledger.get_balance("USD")  # Money(amount=Decimal('1.998'), currency='USD')
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from .exceptions import InsufficientBalance, InvalidLedgerAmount, UnsupportedCurrency
from .models import PlatformWallet, SupportedCurrency, WalletTransaction, WalletTransactionType
from .types import Money

if TYPE_CHECKING:
    from typing import Any


logger = logging.getLogger(__name__)


class WalletLedgerService:
    """
    Service class for platform wallet operations.

    All methods are static - no instance state is maintained.
    """

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    def _validate_currency(currency: str) -> str:
        code = (currency or "").upper()
        if code not in SupportedCurrency.values:
            raise UnsupportedCurrency(
                f"Unsupported currency: {currency}",
                details={
                    "currency": currency,
                    "supported": list(SupportedCurrency.values),
                },
            )
        return code

    @staticmethod
    def _validate_amount(amount: Any) -> Decimal:
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidLedgerAmount(
                "Amount must be a number",
                details={"amount": str(amount)},
            )
        if not value.is_finite():
            raise InvalidLedgerAmount(
                "Amount must be a finite number",
                details={"amount": str(amount)},
            )
        if value == 0:
            raise InvalidLedgerAmount(
                "Amount cannot be zero",
                details={"amount": str(amount)},
            )
        if value < 0:
            raise InvalidLedgerAmount(
                "Amount must be positive",
                details={"amount": str(amount)},
            )
        return value

    @staticmethod
    def _validate_type(transaction_type: str) -> str:
        if transaction_type not in WalletTransactionType.values:
            raise InvalidLedgerAmount(
                f"Unknown transaction type: {transaction_type}",
                error_code="INVALID_TRANSACTION_TYPE",
                details={
                    "type": transaction_type,
                    "allowed": list(WalletTransactionType.values),
                },
            )
        return transaction_type

    # =========================================================================
    # Balance Mutations
    # =========================================================================

    @staticmethod
    def credit(
        currency: str,
        amount: Decimal,
        transaction_type: str,
        description: str = "",
        reference: str = "",
    ) -> PlatformWallet:
        """
        Add amount to the platform wallet for currency.

        Creates the wallet on first use. The increment is an UPDATE with an
        F() expression, so concurrent credits never overwrite each other.

        Args:
            currency: ISO 4217 code from SupportedCurrency
            amount: Positive amount to add
            transaction_type: WalletTransactionType value
            description: Human-readable description for the transaction log
            reference: Optional external reference

        Returns:
            The wallet with its updated balance and version

        Raises:
            InvalidLedgerAmount: Zero, negative or non-numeric amount
            UnsupportedCurrency: Unknown currency
        """
        currency = WalletLedgerService._validate_currency(currency)
        amount = WalletLedgerService._validate_amount(amount)
        transaction_type = WalletLedgerService._validate_type(transaction_type)

        with transaction.atomic():
            wallet, created = PlatformWallet.objects.get_or_create(currency=currency)
            PlatformWallet.objects.filter(pk=wallet.pk).update(
                balance=F("balance") + amount,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )
            WalletTransaction.objects.create(
                wallet=wallet,
                amount=amount,
                currency=currency,
                type=transaction_type,
                description=description,
                reference=reference or "",
            )
            wallet.refresh_from_db()

        logger.info(
            "Platform wallet credited",
            extra={
                "currency": currency,
                "amount": str(amount),
                "type": transaction_type,
                "reference": reference,
                "wallet_created": created,
                "version": wallet.version,
            },
        )
        return wallet

    @staticmethod
    def debit(
        currency: str,
        amount: Decimal,
        transaction_type: str,
        description: str = "",
        reference: str = "",
    ) -> PlatformWallet:
        """
        Subtract amount from the platform wallet for currency.

        The balance check and the decrement are one conditional UPDATE
        (WHERE balance >= amount). If no row matches, nothing changes.

        Raises:
            InsufficientBalance: Balance lower than amount, or no wallet yet
            InvalidLedgerAmount: Zero, negative or non-numeric amount
            UnsupportedCurrency: Unknown currency
        """
        currency = WalletLedgerService._validate_currency(currency)
        amount = WalletLedgerService._validate_amount(amount)
        transaction_type = WalletLedgerService._validate_type(transaction_type)

        with transaction.atomic():
            rows = PlatformWallet.objects.filter(
                currency=currency,
                balance__gte=amount,
            ).update(
                balance=F("balance") - amount,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )

            if rows == 0:
                available = (
                    PlatformWallet.objects.filter(currency=currency)
                    .values_list("balance", flat=True)
                    .first()
                )
                logger.warning(
                    "Platform wallet debit rejected",
                    extra={
                        "currency": currency,
                        "amount": str(amount),
                        "available": str(available),
                    },
                )
                raise InsufficientBalance(
                    currency,
                    required=amount,
                    available=available if available is not None else Decimal("0"),
                )

            wallet = PlatformWallet.objects.get(currency=currency)
            WalletTransaction.objects.create(
                wallet=wallet,
                amount=-amount,
                currency=currency,
                type=transaction_type,
                description=description,
                reference=reference or "",
            )

        logger.info(
            "Platform wallet debited",
            extra={
                "currency": currency,
                "amount": str(amount),
                "type": transaction_type,
                "reference": reference,
                "version": wallet.version,
            },
        )
        return wallet

    # =========================================================================
    # Queries
    # =========================================================================

    @staticmethod
    def get_wallet(currency: str = SupportedCurrency.USD) -> PlatformWallet:
        """Get the wallet for currency, creating an empty one if needed."""
        currency = WalletLedgerService._validate_currency(currency)
        wallet, _ = PlatformWallet.objects.get_or_create(currency=currency)
        return wallet

    @staticmethod
    def get_balance(currency: str = SupportedCurrency.USD) -> Money:
        """Current balance for currency (zero for a new wallet)."""
        wallet = WalletLedgerService.get_wallet(currency)
        return Money(amount=wallet.balance, currency=wallet.currency)

    @staticmethod
    def list_transactions(
        currency: str = SupportedCurrency.USD,
        limit: int = 50,
    ) -> list[WalletTransaction]:
        """Most recent transactions for currency, newest first."""
        currency = WalletLedgerService._validate_currency(currency)
        return list(
            WalletTransaction.objects.filter(currency=currency).order_by("-timestamp")[:limit]
        )


# Singleton instance for convenience
ledger = WalletLedgerService()
