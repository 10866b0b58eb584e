"""
Factory Boy factories for ledger test data.

Factories write ledger rows only; they do not move balances. Use
LedgerService when a test needs the balance and the row to agree.

Usage:
    from payments.ledger.tests.factories import CreditTransactionFactory

    # Pending purchase
    entry = CreditTransactionFactory(user=user, amount=1000)

    # Completed purchase tied to a processor reference
    entry = CreditTransactionFactory(
        user=user,
        status=TransactionStatus.COMPLETED,
        external_payment_ref="pay_123",
    )
"""

import factory

from authentication.tests.factories import UserFactory
from payments.ledger.models import CreditTransaction, TransactionKind, TransactionStatus


class CreditTransactionFactory(factory.django.DjangoModelFactory):
    """
    Factory for CreditTransaction.

    Default creates a pending purchase of 1000 credits with a unique
    external payment reference.
    """

    class Meta:
        model = CreditTransaction
        skip_postgeneration_save = True

    user = factory.SubFactory(UserFactory)
    kind = TransactionKind.PURCHASE
    amount = 1000
    status = TransactionStatus.PENDING
    external_payment_ref = factory.Sequence(lambda n: f"pay_{n:06d}")
    plan = "basic"
    description = factory.LazyAttribute(lambda o: f"Purchase of {o.amount} credits")


class UsageTransactionFactory(CreditTransactionFactory):
    """Completed usage row. Pass related_analysis to tie it to an analysis."""

    kind = TransactionKind.USAGE
    amount = -1
    status = TransactionStatus.COMPLETED
    external_payment_ref = None
    description = "Analysis (Basic)"
