"""
Payment domain models.

This module contains all payment-related models:
- Plan: Credit packs offered at checkout
- CreditTransaction: The credit ledger (defined in payments.ledger, registered
  under the payments app label)
"""

from payments.ledger.models import (
    CreditTransaction,
    TransactionKind,
    TransactionStatus,
)
from payments.models.plan import Plan, PlanQuerySet, PlanType

__all__ = [
    "CreditTransaction",
    "Plan",
    "PlanQuerySet",
    "PlanType",
    "TransactionKind",
    "TransactionStatus",
]
