"""
Tests for ledger models.

This module tests the CreditTransaction model, including the database
constraints that make the ledger idempotent and the purchase state
machine.
"""

import uuid

import pytest
from django.db import IntegrityError, transaction
from django_fsm import TransitionNotAllowed

from analysis.tests.factories import AnalysisFactory
from payments.ledger.models import CreditTransaction, TransactionKind, TransactionStatus
from payments.ledger.tests.factories import (
    CreditTransactionFactory,
    UsageTransactionFactory,
)


class TestCreditTransaction:
    """Tests for the CreditTransaction model."""

    def test_created_with_uuid_primary_key(self, pending_purchase):
        assert isinstance(pending_purchase.id, uuid.UUID)

    def test_defaults(self, user):
        entry = CreditTransaction.objects.create(
            user=user, kind=TransactionKind.BONUS, amount=5
        )

        assert entry.status == TransactionStatus.PENDING
        assert entry.metadata == {}
        assert entry.external_payment_ref is None
        assert entry.related_analysis is None

    def test_str(self, pending_purchase):
        assert str(pending_purchase) == "Purchase +1000 (pending)"


class TestConstraints:
    """Database constraints on ledger rows."""

    def test_external_payment_ref_is_unique(self, user):
        CreditTransactionFactory(user=user, external_payment_ref="pay_dup")

        with pytest.raises(IntegrityError), transaction.atomic():
            CreditTransactionFactory(user=user, external_payment_ref="pay_dup")

    def test_many_rows_without_external_ref(self, user):
        CreditTransactionFactory(user=user, external_payment_ref=None)
        CreditTransactionFactory(user=user, external_payment_ref=None)

        assert CreditTransaction.objects.filter(external_payment_ref__isnull=True).count() == 2

    def test_one_refund_per_analysis(self, user):
        analysis = AnalysisFactory(owner=user)
        CreditTransactionFactory(
            user=user,
            kind=TransactionKind.REFUND,
            amount=1,
            external_payment_ref=None,
            related_analysis=analysis,
        )

        with pytest.raises(IntegrityError), transaction.atomic():
            CreditTransactionFactory(
                user=user,
                kind=TransactionKind.REFUND,
                amount=1,
                external_payment_ref=None,
                related_analysis=analysis,
            )

    def test_one_usage_per_analysis(self, user):
        analysis = AnalysisFactory(owner=user)
        UsageTransactionFactory(user=user, related_analysis=analysis)

        with pytest.raises(IntegrityError), transaction.atomic():
            UsageTransactionFactory(user=user, related_analysis=analysis)

    def test_usage_and_refund_may_share_an_analysis(self, user):
        analysis = AnalysisFactory(owner=user)
        UsageTransactionFactory(user=user, related_analysis=analysis)
        CreditTransactionFactory(
            user=user,
            kind=TransactionKind.REFUND,
            amount=1,
            external_payment_ref=None,
            related_analysis=analysis,
        )

        assert analysis.credit_transactions.count() == 2

    def test_usage_must_be_negative(self, user):
        with pytest.raises(IntegrityError), transaction.atomic():
            UsageTransactionFactory(user=user, amount=1)

    @pytest.mark.parametrize(
        "kind", [TransactionKind.PURCHASE, TransactionKind.REFUND, TransactionKind.BONUS]
    )
    def test_credit_kinds_must_not_be_negative(self, user, kind):
        with pytest.raises(IntegrityError), transaction.atomic():
            CreditTransactionFactory(
                user=user, kind=kind, amount=-5, external_payment_ref=None
            )


class TestPurchaseStateMachine:
    """pending -> completed / failed transitions."""

    def test_complete_sets_final_amount(self, pending_purchase):
        pending_purchase.complete(amount=1500)

        assert pending_purchase.status == TransactionStatus.COMPLETED
        assert pending_purchase.amount == 1500
        assert pending_purchase.is_settled

    def test_complete_keeps_amount_when_not_given(self, pending_purchase):
        pending_purchase.complete()

        assert pending_purchase.amount == 1000

    def test_fail(self, pending_purchase):
        pending_purchase.fail()

        assert pending_purchase.status == TransactionStatus.FAILED
        assert pending_purchase.is_settled

    def test_completed_cannot_fail(self, pending_purchase):
        pending_purchase.complete()

        with pytest.raises(TransitionNotAllowed):
            pending_purchase.fail()

    def test_failed_cannot_complete(self, pending_purchase):
        pending_purchase.fail()

        with pytest.raises(TransitionNotAllowed):
            pending_purchase.complete()
