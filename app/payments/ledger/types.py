"""
Data types for ledger reporting.

Types:
    HistoryStats: Per-kind totals of an account's credit history
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class HistoryStats:
    """
    Totals shown next to the credit history.

    Attributes:
        total_purchased: Credits from completed purchases
        total_used: Credits spent on analyses (positive number)
        total_refunded: Credits returned for failed analyses
        total_bonus: Credits granted by staff

    Example:
        stats = LedgerService.history_stats(user.credit_transactions.all())
        stats.net  # purchased + refunded + bonus - used
    """

    total_purchased: int = 0
    total_used: int = 0
    total_refunded: int = 0
    total_bonus: int = 0

    @property
    def net(self) -> int:
        """Balance implied by the totals."""
        return (
            self.total_purchased
            + self.total_refunded
            + self.total_bonus
            - self.total_used
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
