"""
Ledger-specific exceptions for platform wallet operations.

Exception Hierarchy:
    LedgerError (base, 400)
    ├── InvalidLedgerAmount - Zero, negative or non-numeric amounts (ValidationError, 400)
    ├── UnsupportedCurrency - Currency outside SupportedCurrency (ValidationError, 400)
    └── InsufficientBalance - Debit larger than the balance (ConflictError, 409)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError, ValidationError

if TYPE_CHECKING:
    from decimal import Decimal
    from typing import Any


class LedgerError(BaseApplicationError):
    """Base exception for all ledger operations."""

    default_error_code: str = "LEDGER_ERROR"
    status_code: int = 400


class InvalidLedgerAmount(LedgerError, ValidationError):
    default_error_code: str = "INVALID_AMOUNT"


class UnsupportedCurrency(LedgerError, ValidationError):
    default_error_code: str = "UNSUPPORTED_CURRENCY"


class InsufficientBalance(LedgerError, ConflictError):
    """
    Raised when a wallet has insufficient funds for a debit.

    The balance is left untouched and no transaction row is appended.

    Attributes:
        currency: Wallet currency
        required: The amount that was requested
        available: The balance at the time of the failed debit
    """

    default_error_code: str = "INSUFFICIENT_BALANCE"
    status_code: int = 409

    def __init__(
        self,
        currency: str,
        required: Decimal,
        available: Decimal,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.currency = currency
        self.required = required
        self.available = available

        message = (
            f"Platform wallet {currency} has insufficient balance: "
            f"required {required}, available {available}"
        )

        full_details = {
            "currency": currency,
            "required": str(required),
            "available": str(available),
        }
        if details:
            full_details.update(details)

        super().__init__(
            message=message,
            error_code=error_code,
            details=full_details,
        )
