"""
Ledger - per-currency platform wallet with an append-only transaction log.

Public API:
    Models:
        PlatformWallet - Platform balance for one currency
        WalletTransaction - Append-only balance change record
        SupportedCurrency - Currencies accepted for plans and wallets
        WalletTransactionType - subscription, withdrawal, refund

    Service:
        ledger - Singleton instance of WalletLedgerService
        WalletLedgerService - credit, debit, get_balance, list_transactions

    Types:
        Money - Decimal amount with currency
        RevenueSplit - Artist/platform shares of a payment

    Exceptions:
        LedgerError - Base exception for ledger operations
        InsufficientBalance - Debit larger than balance
        InvalidLedgerAmount - Zero, negative or non-numeric amount
        UnsupportedCurrency - Currency outside SupportedCurrency

Usage:
    from subscriptions.ledger import ledger, InsufficientBalance, WalletTransactionType

    try:
        ledger.debit("USD", Decimal("50"), WalletTransactionType.WITHDRAWAL, "Payout")
    except InsufficientBalance as e:
        print(f"Need {e.required}, have {e.available}")
"""

from .exceptions import (
    InsufficientBalance,
    InvalidLedgerAmount,
    LedgerError,
    UnsupportedCurrency,
)
from .models import PlatformWallet, SupportedCurrency, WalletTransaction, WalletTransactionType
from .services import WalletLedgerService, ledger
from .types import Money, RevenueSplit

__all__ = [
    # Models
    "PlatformWallet",
    "WalletTransaction",
    "SupportedCurrency",
    "WalletTransactionType",
    # Service
    "ledger",
    "WalletLedgerService",
    # Types
    "Money",
    "RevenueSplit",
    # Exceptions
    "LedgerError",
    "InsufficientBalance",
    "InvalidLedgerAmount",
    "UnsupportedCurrency",
]
