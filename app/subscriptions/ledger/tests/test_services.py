"""
Tests for WalletLedgerService.

Tests cover:
- Credits create the wallet on first use and append a transaction
- Debits are conditional: insufficient balance changes nothing
- Amount, currency and type validation
- Balance equals the sum of the transaction log
"""

from decimal import Decimal

import pytest
from django.db.models import Sum

from subscriptions.ledger import (
    InsufficientBalance,
    InvalidLedgerAmount,
    Money,
    PlatformWallet,
    UnsupportedCurrency,
    WalletTransaction,
    WalletTransactionType,
    ledger,
)


@pytest.mark.django_db
class TestCredit:
    """Tests for WalletLedgerService.credit()."""

    def test_first_credit_creates_wallet(self):
        wallet = ledger.credit("USD", Decimal("1.998"), WalletTransactionType.SUBSCRIPTION)

        assert wallet.currency == "USD"
        assert wallet.balance == Decimal("1.998")
        assert wallet.version == 1
        assert PlatformWallet.objects.count() == 1

    def test_credit_appends_transaction(self):
        ledger.credit(
            "USD",
            Decimal("1.998"),
            WalletTransactionType.SUBSCRIPTION,
            description="Platform share",
            reference="ref_123",
        )

        txn = WalletTransaction.objects.get()
        assert txn.amount == Decimal("1.998")
        assert txn.type == WalletTransactionType.SUBSCRIPTION
        assert txn.reference == "ref_123"
        assert txn.description == "Platform share"

    def test_currencies_have_separate_wallets(self):
        ledger.credit("USD", Decimal("5"), WalletTransactionType.SUBSCRIPTION)
        ledger.credit("NGN", Decimal("1500"), WalletTransactionType.SUBSCRIPTION)

        assert ledger.get_balance("USD") == Money(Decimal("5"), "USD")
        assert ledger.get_balance("NGN") == Money(Decimal("1500"), "NGN")

    def test_lowercase_currency_is_normalized(self):
        wallet = ledger.credit("usd", Decimal("1"), WalletTransactionType.SUBSCRIPTION)

        assert wallet.currency == "USD"

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), "not-a-number", "NaN"])
    def test_rejects_invalid_amounts(self, amount):
        with pytest.raises(InvalidLedgerAmount):
            ledger.credit("USD", amount, WalletTransactionType.SUBSCRIPTION)

        assert WalletTransaction.objects.count() == 0

    def test_rejects_unsupported_currency(self):
        with pytest.raises(UnsupportedCurrency) as exc_info:
            ledger.credit("XYZ", Decimal("1"), WalletTransactionType.SUBSCRIPTION)

        assert exc_info.value.status_code == 400

    def test_rejects_unknown_transaction_type(self):
        with pytest.raises(InvalidLedgerAmount) as exc_info:
            ledger.credit("USD", Decimal("1"), "bonus")

        assert exc_info.value.error_code == "INVALID_TRANSACTION_TYPE"


@pytest.mark.django_db
class TestDebit:
    """Tests for WalletLedgerService.debit()."""

    def test_debit_decrements_and_logs_negative_amount(self):
        ledger.credit("USD", Decimal("100"), WalletTransactionType.SUBSCRIPTION)

        wallet = ledger.debit("USD", Decimal("40"), WalletTransactionType.WITHDRAWAL)

        assert wallet.balance == Decimal("60")
        txn = WalletTransaction.objects.get(type=WalletTransactionType.WITHDRAWAL)
        assert txn.amount == Decimal("-40")

    def test_debit_of_entire_balance_is_allowed(self):
        ledger.credit("USD", Decimal("10"), WalletTransactionType.SUBSCRIPTION)

        wallet = ledger.debit("USD", Decimal("10"), WalletTransactionType.WITHDRAWAL)

        assert wallet.balance == Decimal("0")

    def test_insufficient_balance_changes_nothing(self):
        """Balance 100, debit 150: rejected, balance and log untouched."""
        ledger.credit("USD", Decimal("100"), WalletTransactionType.SUBSCRIPTION)

        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.debit("USD", Decimal("150"), WalletTransactionType.WITHDRAWAL)

        assert exc_info.value.required == Decimal("150")
        assert exc_info.value.available == Decimal("100")
        assert exc_info.value.status_code == 409
        assert ledger.get_balance("USD").amount == Decimal("100")
        assert WalletTransaction.objects.count() == 1

    def test_debit_without_wallet_is_insufficient(self):
        with pytest.raises(InsufficientBalance) as exc_info:
            ledger.debit("EUR", Decimal("1"), WalletTransactionType.WITHDRAWAL)

        assert exc_info.value.available == Decimal("0")

    def test_debit_rejects_zero(self):
        ledger.credit("USD", Decimal("10"), WalletTransactionType.SUBSCRIPTION)

        with pytest.raises(InvalidLedgerAmount):
            ledger.debit("USD", Decimal("0"), WalletTransactionType.WITHDRAWAL)


@pytest.mark.django_db
class TestQueries:
    """Tests for get_balance() and list_transactions()."""

    def test_balance_of_new_wallet_is_zero(self):
        assert ledger.get_balance("GBP") == Money(Decimal("0"), "GBP")

    def test_balance_matches_transaction_sum(self):
        ledger.credit("USD", Decimal("1.998"), WalletTransactionType.SUBSCRIPTION)
        ledger.credit("USD", Decimal("3.5"), WalletTransactionType.SUBSCRIPTION)
        ledger.debit("USD", Decimal("2"), WalletTransactionType.WITHDRAWAL)

        total = WalletTransaction.objects.filter(currency="USD").aggregate(total=Sum("amount"))[
            "total"
        ]
        assert ledger.get_balance("USD").amount == total == Decimal("3.498")

    def test_list_transactions_newest_first_and_limited(self):
        for amount in ("1", "2", "3"):
            ledger.credit("USD", Decimal(amount), WalletTransactionType.SUBSCRIPTION)

        transactions = ledger.list_transactions("USD", limit=2)

        assert len(transactions) == 2
        assert transactions[0].timestamp >= transactions[1].timestamp
