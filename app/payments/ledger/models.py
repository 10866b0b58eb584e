"""
Credit ledger models.

This module defines the append-only log of every credit movement:
- TransactionKind: purchase / usage / refund / bonus
- TransactionStatus: pending / completed / failed
- CreditTransaction: One signed movement on one account

The account balance (User.credits) is a denormalized running total of the
completed rows. LedgerService keeps both in the same database transaction,
and the audit task checks that they agree.

Sign convention:
    amount has the sign of its effect on the balance. Usage rows are
    negative; purchase, refund and bonus rows are zero or positive.

Usage:
    from payments.ledger.models import CreditTransaction, TransactionKind

    history = CreditTransaction.objects.filter(
        user=user, kind=TransactionKind.USAGE
    )
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django_fsm import FSMField, transition

from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel


class TransactionKind(models.TextChoices):
    """
    Category of a credit movement.

    Values:
        PURCHASE: Credits bought through the payment processor
        USAGE: Credits reserved when an analysis is submitted
        REFUND: Credits returned when an analysis fails
        BONUS: Credits granted by staff
    """

    PURCHASE = "purchase", "Purchase"
    USAGE = "usage", "Usage"
    REFUND = "refund", "Refund"
    BONUS = "bonus", "Bonus"


class TransactionStatus(models.TextChoices):
    """
    Settlement status of a ledger row.

    Flow:
        PENDING -> COMPLETED (payment approved)
        PENDING -> FAILED (payment cancelled or refunded)

    Usage, refund and bonus rows are written directly as COMPLETED.
    Only completed rows count towards the balance.
    """

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class CreditTransaction(UUIDPrimaryKeyMixin, MetadataMixin, BaseModel):
    """
    One row of the credit ledger.

    Fields:
        id: UUID primary key
        user: Account whose balance this row affects
        kind: purchase / usage / refund / bonus
        amount: Signed credit delta
        status: pending / completed / failed (FSM, forward only)
        external_payment_ref: Payment processor transaction id (unique)
        related_analysis: Analysis a usage or refund row belongs to
        description: Human-readable label
        plan: Plan or analysis tier label
        metadata: Provider payload fragments (original status, price)

    Constraints:
        - external_payment_ref unique when present
        - at most one usage and one refund row per analysis
        - usage amounts negative, all other kinds non-negative
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="credit_transactions",
        help_text="Account whose balance this row affects",
    )
    kind = models.CharField(
        max_length=20,
        choices=TransactionKind.choices,
        help_text="Category of this movement",
    )
    amount = models.IntegerField(
        help_text="Signed credit delta (usage rows are negative)",
    )
    status = FSMField(
        default=TransactionStatus.PENDING,
        choices=TransactionStatus.choices,
        db_index=True,
        protected=True,
        help_text="Only completed rows count towards the balance",
    )

    external_payment_ref = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text="Payment processor transaction id (idempotency key)",
    )
    related_analysis = models.ForeignKey(
        "analysis.Analysis",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="credit_transactions",
        help_text="Analysis this usage or refund belongs to",
    )

    description = models.CharField(
        max_length=255,
        blank=True,
        help_text="Human-readable description",
    )
    plan = models.CharField(
        max_length=50,
        blank=True,
        help_text="Plan type or analysis tier",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["user", "-created_at"],
                name="credit_tx_user_created_idx",
            ),
            models.Index(
                fields=["kind", "status"],
                name="credit_tx_kind_status_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["related_analysis"],
                condition=Q(kind="refund"),
                name="unique_refund_per_analysis",
            ),
            models.UniqueConstraint(
                fields=["related_analysis"],
                condition=Q(kind="usage"),
                name="unique_usage_per_analysis",
            ),
            models.CheckConstraint(
                condition=(
                    Q(kind="usage", amount__lt=0)
                    | (~Q(kind="usage") & Q(amount__gte=0))
                ),
                name="credit_transaction_amount_sign",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.get_kind_display()} {self.amount:+d} ({self.status})"

    @property
    def is_settled(self) -> bool:
        """Whether the row reached a terminal status."""
        return self.status != TransactionStatus.PENDING

    # =========================================================================
    # State Transitions
    # =========================================================================

    @transition(
        field=status,
        source=TransactionStatus.PENDING,
        target=TransactionStatus.COMPLETED,
    )
    def complete(self, amount: int | None = None):
        """
        Settle a pending purchase as paid.

        Args:
            amount: Final credit amount reported with the approval
        """
        if amount is not None:
            self.amount = amount

    @transition(
        field=status,
        source=TransactionStatus.PENDING,
        target=TransactionStatus.FAILED,
    )
    def fail(self):
        """Settle a pending purchase as not paid. No balance effect."""
