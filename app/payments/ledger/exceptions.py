"""
Ledger-specific exceptions.

Exception Hierarchy:
    LedgerError (base)
    ├── InsufficientCreditsError - Balance below the requested debit
    └── InconsistencyWarning - Balance and ledger disagree (never returned
                               to clients, only logged)

Usage:
    from payments.ledger.exceptions import InsufficientCreditsError

    raise InsufficientCreditsError(user.pk, required=3, available=1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any


class LedgerError(BaseApplicationError):
    """Base exception for all ledger operations."""

    default_error_code: str = "LEDGER_ERROR"


class InsufficientCreditsError(LedgerError):
    """
    Raised when an account has fewer credits than a debit requires.

    Attributes:
        user_id: Account that was debited
        required: Credits requested
        available: Credits on the account when the debit was refused
    """

    default_error_code: str = "INSUFFICIENT_CREDITS"

    def __init__(
        self,
        user_id: int,
        required: int,
        available: int,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.user_id = user_id
        self.required = required
        self.available = available

        full_details = {"required": required, "available": available}
        if details:
            full_details.update(details)

        super().__init__(
            message=(
                f"Insufficient credits: required {required}, available {available}"
            ),
            error_code=error_code,
            details=full_details,
        )


class InconsistencyWarning(LedgerError):
    """
    A balance that does not match the sum of its completed ledger rows.

    Non-fatal. It is logged for out-of-band reconciliation and the balance
    is never corrected automatically.

    Attributes:
        user_id: Account with the mismatch
        balance: Stored balance
        ledger_total: Sum of completed ledger rows
    """

    default_error_code: str = "LEDGER_INCONSISTENCY"

    def __init__(self, user_id: int, balance: int, ledger_total: int):
        self.user_id = user_id
        self.balance = balance
        self.ledger_total = ledger_total
        super().__init__(
            message=(
                f"Account {user_id} balance {balance} differs from "
                f"ledger total {ledger_total}"
            ),
            details={
                "user_id": user_id,
                "balance": balance,
                "ledger_total": ledger_total,
                "difference": balance - ledger_total,
            },
        )
