"""
Ledger - Append-only log of credit movements.

Every change to User.credits is paired with one CreditTransaction row in
the same database transaction, so the stored balance always equals the
sum of the completed rows.

Public API:
    Models:
        CreditTransaction - One signed credit movement
        TransactionKind - purchase / usage / refund / bonus
        TransactionStatus - pending / completed / failed

    Service:
        ledger - Singleton instance of LedgerService
        LedgerService - Class with all ledger operations

    Types:
        HistoryStats - Per-kind totals of a credit history

    Exceptions:
        LedgerError - Base exception for ledger operations
        InsufficientCreditsError - Balance below the requested debit
        InconsistencyWarning - Balance and ledger disagree

Usage:
    from payments.ledger import ledger, InsufficientCreditsError

    try:
        with transaction.atomic():
            ledger.record_usage(user, analysis, amount=3)
    except InsufficientCreditsError as e:
        print(f"Need {e.required}, have {e.available}")
"""

from .exceptions import InconsistencyWarning, InsufficientCreditsError, LedgerError
from .models import CreditTransaction, TransactionKind, TransactionStatus
from .services import LedgerService, ledger
from .types import HistoryStats

__all__ = [
    # Models
    "CreditTransaction",
    "TransactionKind",
    "TransactionStatus",
    # Service
    "ledger",
    "LedgerService",
    # Types
    "HistoryStats",
    # Exceptions
    "LedgerError",
    "InsufficientCreditsError",
    "InconsistencyWarning",
]
