"""
Data types returned by the analysis services.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from analysis.models import Analysis
    from payments.ledger.models import CreditTransaction


class SettlementOutcome:
    """Terminal outcomes reported by the analysis pipeline."""

    COMPLETED = "completed"
    FAILED = "failed"

    ALL = (COMPLETED, FAILED)


@dataclass
class Settlement:
    """
    What settle() did.

    Attributes:
        analysis: The analysis after settlement
        applied: False when the analysis was already terminal (redelivery)
        refund: Refund ledger row written by this call, if any
    """

    analysis: Analysis
    applied: bool = True
    refund: CreditTransaction | None = None
