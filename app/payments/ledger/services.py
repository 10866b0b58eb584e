"""
Ledger service layer for credit movements.

This module provides the LedgerService class which encapsulates every
write to an account balance. Each balance change is a single atomic SQL
UPDATE and is paired with exactly one CreditTransaction row, in the
caller's database transaction.

Usage:
    from payments.ledger.services import LedgerService, ledger

    with transaction.atomic():
        entry = ledger.record_usage(user, analysis, amount=3)

    stats = ledger.history_stats(user.credit_transactions.all())

Concurrency:
    - Debits are conditional (credits >= amount) so two racing debits can
      never take a balance below zero. The loser gets InsufficientCreditsError.
    - Idempotency comes from unique constraints on the ledger rows
      (external_payment_ref, one refund per analysis), never from the balance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from .exceptions import InconsistencyWarning, InsufficientCreditsError, LedgerError
from .models import CreditTransaction, TransactionKind, TransactionStatus
from .types import HistoryStats

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from analysis.models import Analysis
    from authentication.models import User

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Service class for ledger operations.

    Methods that move credits must run inside transaction.atomic(); the
    balance update and the ledger row commit or roll back together.

    All methods are static - no instance state is maintained.
    """

    # =========================================================================
    # Balance primitives
    # =========================================================================

    @staticmethod
    def debit(user_id: int, amount: int) -> None:
        """
        Subtract credits if and only if the balance covers them.

        Args:
            user_id: Account to debit
            amount: Positive number of credits

        Raises:
            InsufficientCreditsError: If the balance is below amount. Nothing
                is written in that case.
        """
        if amount <= 0:
            raise LedgerError(
                "Debit amount must be positive",
                details={"amount": amount},
            )

        User = get_user_model()
        updated = User.objects.filter(pk=user_id, credits__gte=amount).update(
            credits=F("credits") - amount,
            updated_at=timezone.now(),
        )
        if not updated:
            available = (
                User.objects.filter(pk=user_id)
                .values_list("credits", flat=True)
                .first()
            )
            raise InsufficientCreditsError(
                user_id, required=amount, available=available or 0
            )

    @staticmethod
    def credit(user_id: int, amount: int) -> None:
        """
        Add credits to an account.

        Args:
            user_id: Account to credit
            amount: Non-negative number of credits
        """
        if amount < 0:
            raise LedgerError(
                "Credit amount must not be negative",
                details={"amount": amount},
            )
        if amount == 0:
            return

        User = get_user_model()
        User.objects.filter(pk=user_id).update(
            credits=F("credits") + amount,
            updated_at=timezone.now(),
        )

    @staticmethod
    def get_balance(user_id: int) -> int:
        """Current stored balance of an account (0 if it does not exist)."""
        User = get_user_model()
        return (
            User.objects.filter(pk=user_id).values_list("credits", flat=True).first()
            or 0
        )

    # =========================================================================
    # Analysis credits
    # =========================================================================

    @staticmethod
    def record_usage(
        user: User, analysis: Analysis, amount: int
    ) -> CreditTransaction:
        """
        Debit the credits reserved by an analysis and log the usage row.

        Args:
            user: Owner of the analysis
            analysis: The freshly created analysis
            amount: Credits reserved (positive)

        Returns:
            The completed usage CreditTransaction

        Raises:
            InsufficientCreditsError: If the balance does not cover amount
        """
        LedgerService.debit(user.pk, amount)
        return CreditTransaction.objects.create(
            user=user,
            kind=TransactionKind.USAGE,
            amount=-amount,
            status=TransactionStatus.COMPLETED,
            related_analysis=analysis,
            plan=analysis.tier,
            description=f"Analysis ({analysis.get_tier_display()})",
        )

    @staticmethod
    def refund_analysis(analysis: Analysis) -> CreditTransaction | None:
        """
        Return the credits reserved by a failed analysis, at most once.

        The refund row is inserted before the balance moves. The conditional
        unique constraint on (related_analysis, kind=refund) makes a second
        insert fail, in which case nothing is credited.

        Args:
            analysis: Failed analysis (locked by the caller)

        Returns:
            The new refund row, or None if one already existed
        """
        if analysis.credits_reserved <= 0:
            return None

        if CreditTransaction.objects.filter(
            related_analysis=analysis, kind=TransactionKind.REFUND
        ).exists():
            logger.info(
                "Refund already recorded for analysis",
                extra={"analysis_id": str(analysis.pk)},
            )
            return None

        try:
            with transaction.atomic():
                entry = CreditTransaction.objects.create(
                    user_id=analysis.owner_id,
                    kind=TransactionKind.REFUND,
                    amount=analysis.credits_reserved,
                    status=TransactionStatus.COMPLETED,
                    related_analysis=analysis,
                    plan=analysis.tier,
                    description=f"Refund for failed analysis {analysis.pk}",
                )
        except IntegrityError:
            logger.info(
                "Concurrent refund detected for analysis",
                extra={"analysis_id": str(analysis.pk)},
            )
            return None

        LedgerService.credit(analysis.owner_id, analysis.credits_reserved)
        return entry

    # =========================================================================
    # Purchases
    # =========================================================================

    @staticmethod
    def open_purchase(
        user: User,
        amount: int,
        external_payment_ref: str | None = None,
        plan: str = "",
        description: str = "",
        metadata: dict | None = None,
    ) -> CreditTransaction:
        """
        Create a pending purchase row. No balance effect.

        Raises:
            IntegrityError: If external_payment_ref is already recorded. The
                caller decides whether that means "re-read and retry".
        """
        opts = CreditTransaction._meta
        # Processor-supplied labels are cut to the column size
        plan = (plan or "")[: opts.get_field("plan").max_length]
        description = (description or f"Purchase of {amount} credits")[
            : opts.get_field("description").max_length
        ]

        with transaction.atomic():
            return CreditTransaction.objects.create(
                user=user,
                kind=TransactionKind.PURCHASE,
                amount=amount,
                status=TransactionStatus.PENDING,
                external_payment_ref=external_payment_ref,
                plan=plan,
                description=description,
                metadata=metadata or {},
            )

    @staticmethod
    def complete_purchase(
        entry: CreditTransaction, amount: int | None = None
    ) -> CreditTransaction:
        """
        Settle a pending purchase as paid and credit the account.

        Args:
            entry: Pending purchase row (locked by the caller)
            amount: Final amount if the notification reports one

        Returns:
            The completed entry
        """
        entry.complete(amount=amount)
        entry.save(update_fields=["status", "amount", "updated_at"])
        LedgerService.credit(entry.user_id, entry.amount)

        logger.info(
            "Purchase completed",
            extra={
                "transaction_id": str(entry.pk),
                "user_id": entry.user_id,
                "amount": entry.amount,
            },
        )
        return entry

    @staticmethod
    def fail_purchase(entry: CreditTransaction) -> CreditTransaction:
        """Settle a pending purchase as not paid. The balance is unchanged."""
        entry.fail()
        entry.save(update_fields=["status", "updated_at"])
        logger.info(
            "Purchase failed",
            extra={"transaction_id": str(entry.pk), "user_id": entry.user_id},
        )
        return entry

    @staticmethod
    def grant_bonus(
        user: User, amount: int, description: str = ""
    ) -> CreditTransaction:
        """
        Grant free credits with a completed bonus row.

        Args:
            user: Account to credit
            amount: Positive number of credits
            description: Reason shown in the history
        """
        if amount <= 0:
            raise LedgerError(
                "Bonus amount must be positive",
                details={"amount": amount},
            )

        with transaction.atomic():
            entry = CreditTransaction.objects.create(
                user=user,
                kind=TransactionKind.BONUS,
                amount=amount,
                status=TransactionStatus.COMPLETED,
                description=description or "Bonus credits",
            )
            LedgerService.credit(user.pk, amount)

        logger.info(
            "Bonus credits granted",
            extra={"user_id": user.pk, "amount": amount},
        )
        return entry

    # =========================================================================
    # Reporting
    # =========================================================================

    @staticmethod
    def ledger_sum(user_id: int) -> int:
        """Sum of the completed ledger rows of an account."""
        total = CreditTransaction.objects.filter(
            user_id=user_id, status=TransactionStatus.COMPLETED
        ).aggregate(total=Sum("amount"))["total"]
        return total or 0

    @staticmethod
    def audit_account(user: User) -> InconsistencyWarning | None:
        """
        Compare a stored balance with its ledger.

        Returns:
            InconsistencyWarning describing the mismatch, or None if the
            account is consistent. The balance is never corrected here.
        """
        balance = LedgerService.get_balance(user.pk)
        total = LedgerService.ledger_sum(user.pk)
        if balance == total:
            return None
        return InconsistencyWarning(user.pk, balance=balance, ledger_total=total)

    @staticmethod
    def history_stats(queryset: QuerySet[CreditTransaction]) -> HistoryStats:
        """
        Per-kind totals of the completed rows in a queryset.

        Args:
            queryset: Ledger rows, usually one user's history

        Returns:
            HistoryStats with usage reported as a positive number
        """
        totals = dict(
            queryset.filter(status=TransactionStatus.COMPLETED)
            .order_by()
            .values_list("kind")
            .annotate(total=Sum("amount"))
        )
        return HistoryStats(
            total_purchased=totals.get(TransactionKind.PURCHASE, 0) or 0,
            total_used=abs(totals.get(TransactionKind.USAGE, 0) or 0),
            total_refunded=totals.get(TransactionKind.REFUND, 0) or 0,
            total_bonus=totals.get(TransactionKind.BONUS, 0) or 0,
        )


# Convenience singleton for simpler imports
ledger = LedgerService()
