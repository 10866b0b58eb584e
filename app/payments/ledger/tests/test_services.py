"""
Tests for LedgerService.

This module tests the service layer for credit movements: conditional
debits, refunds that happen at most once, purchase settlement, bonus
grants and the reporting helpers.
"""

import pytest
from django.db import IntegrityError, transaction

from analysis.tests.factories import AnalysisFactory
from authentication.models import User
from payments.ledger.exceptions import (
    InconsistencyWarning,
    InsufficientCreditsError,
    LedgerError,
)
from payments.ledger.models import CreditTransaction, TransactionKind, TransactionStatus
from payments.ledger.services import LedgerService
from payments.ledger.tests.factories import CreditTransactionFactory


def balance_of(user):
    return User.objects.values_list("credits", flat=True).get(pk=user.pk)


class TestDebit:
    """Tests for LedgerService.debit()."""

    def test_subtracts_credits(self, funded_user):
        LedgerService.debit(funded_user.pk, 4)

        assert balance_of(funded_user) == 6

    def test_exact_balance_can_be_spent(self, funded_user):
        LedgerService.debit(funded_user.pk, 10)

        assert balance_of(funded_user) == 0

    def test_insufficient_credits_raises_without_writing(self, funded_user):
        with pytest.raises(InsufficientCreditsError) as exc_info:
            LedgerService.debit(funded_user.pk, 11)

        assert exc_info.value.error_code == "INSUFFICIENT_CREDITS"
        assert exc_info.value.details == {"required": 11, "available": 10}
        assert balance_of(funded_user) == 10

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_amount_is_rejected(self, funded_user, amount):
        with pytest.raises(LedgerError):
            LedgerService.debit(funded_user.pk, amount)

    def test_unknown_account_reports_zero_available(self, db):
        with pytest.raises(InsufficientCreditsError) as exc_info:
            LedgerService.debit(999999, 1)

        assert exc_info.value.available == 0


class TestCredit:
    """Tests for LedgerService.credit() / get_balance()."""

    def test_adds_credits(self, user):
        LedgerService.credit(user.pk, 25)

        assert LedgerService.get_balance(user.pk) == 25

    def test_zero_is_a_no_op(self, user):
        LedgerService.credit(user.pk, 0)

        assert LedgerService.get_balance(user.pk) == 0

    def test_negative_amount_is_rejected(self, user):
        with pytest.raises(LedgerError):
            LedgerService.credit(user.pk, -1)

    def test_balance_of_unknown_account_is_zero(self, db):
        assert LedgerService.get_balance(999999) == 0


class TestRecordUsage:
    """Tests for LedgerService.record_usage()."""

    def test_debits_and_logs_usage(self, funded_user):
        analysis = AnalysisFactory(owner=funded_user, tier="complete")

        entry = LedgerService.record_usage(funded_user, analysis, 3)

        assert entry.kind == TransactionKind.USAGE
        assert entry.amount == -3
        assert entry.status == TransactionStatus.COMPLETED
        assert entry.related_analysis_id == analysis.pk
        assert entry.description == "Analysis (Complete)"
        assert balance_of(funded_user) == 7
        assert LedgerService.ledger_sum(funded_user.pk) == 7

    def test_insufficient_credits_logs_nothing(self, user):
        analysis = AnalysisFactory(owner=user)

        with pytest.raises(InsufficientCreditsError):
            LedgerService.record_usage(user, analysis, 1)

        assert not CreditTransaction.objects.filter(related_analysis=analysis).exists()


class TestRefundAnalysis:
    """Tests for LedgerService.refund_analysis()."""

    def test_refunds_reserved_credits(self, funded_user, failed_analysis):
        entry = LedgerService.refund_analysis(failed_analysis)

        assert entry.kind == TransactionKind.REFUND
        assert entry.amount == 3
        assert entry.status == TransactionStatus.COMPLETED
        assert balance_of(funded_user) == 10
        assert LedgerService.ledger_sum(funded_user.pk) == 10

    def test_second_refund_is_skipped(self, funded_user, failed_analysis):
        LedgerService.refund_analysis(failed_analysis)

        assert LedgerService.refund_analysis(failed_analysis) is None
        assert balance_of(funded_user) == 10

    def test_lost_insert_race_credits_nothing(self, funded_user, failed_analysis, mocker):
        """The unique constraint stops a refund that slipped past the pre-check."""
        LedgerService.refund_analysis(failed_analysis)
        mocker.patch("django.db.models.query.QuerySet.exists", return_value=False)

        assert LedgerService.refund_analysis(failed_analysis) is None
        assert balance_of(funded_user) == 10

    def test_nothing_reserved_nothing_refunded(self, user):
        analysis = AnalysisFactory(owner=user, credits_reserved=0)

        assert LedgerService.refund_analysis(analysis) is None


class TestPurchases:
    """Tests for open_purchase() / complete_purchase() / fail_purchase()."""

    def test_open_purchase_has_no_balance_effect(self, user):
        entry = LedgerService.open_purchase(
            user, 1000, external_payment_ref="pay_1", plan="basic"
        )

        assert entry.status == TransactionStatus.PENDING
        assert entry.description == "Purchase of 1000 credits"
        assert balance_of(user) == 0

    def test_duplicate_ref_raises_integrity_error(self, user):
        LedgerService.open_purchase(user, 1000, external_payment_ref="pay_1")

        with pytest.raises(IntegrityError):
            LedgerService.open_purchase(user, 1000, external_payment_ref="pay_1")

    def test_complete_purchase_credits_account(self, user, pending_purchase):
        LedgerService.complete_purchase(pending_purchase)

        entry = CreditTransaction.objects.get(pk=pending_purchase.pk)
        assert entry.status == TransactionStatus.COMPLETED
        assert balance_of(user) == 1000
        assert LedgerService.ledger_sum(user.pk) == 1000

    def test_complete_purchase_with_reported_amount(self, user, pending_purchase):
        LedgerService.complete_purchase(pending_purchase, amount=3000)

        assert CreditTransaction.objects.get(pk=pending_purchase.pk).amount == 3000
        assert balance_of(user) == 3000

    def test_fail_purchase_keeps_balance(self, user, pending_purchase):
        LedgerService.fail_purchase(pending_purchase)

        entry = CreditTransaction.objects.get(pk=pending_purchase.pk)
        assert entry.status == TransactionStatus.FAILED
        assert balance_of(user) == 0
        assert LedgerService.ledger_sum(user.pk) == 0


class TestGrantBonus:
    """Tests for LedgerService.grant_bonus()."""

    def test_grants_completed_bonus(self, user):
        entry = LedgerService.grant_bonus(user, 50, description="Launch promo")

        assert entry.kind == TransactionKind.BONUS
        assert entry.status == TransactionStatus.COMPLETED
        assert entry.description == "Launch promo"
        assert balance_of(user) == 50

    def test_non_positive_bonus_is_rejected(self, user):
        with pytest.raises(LedgerError):
            LedgerService.grant_bonus(user, 0)

        assert not CreditTransaction.objects.filter(user=user).exists()


class TestAudit:
    """Tests for ledger_sum() / audit_account()."""

    def test_only_completed_rows_count(self, user):
        CreditTransactionFactory(user=user, amount=500)
        CreditTransactionFactory(user=user, amount=700, status=TransactionStatus.FAILED)
        LedgerService.grant_bonus(user, 5)

        assert LedgerService.ledger_sum(user.pk) == 5

    def test_consistent_account(self, funded_user):
        assert LedgerService.audit_account(funded_user) is None

    def test_detects_balance_changed_outside_ledger(self, funded_user):
        User.objects.filter(pk=funded_user.pk).update(credits=15)

        warning = LedgerService.audit_account(funded_user)

        assert isinstance(warning, InconsistencyWarning)
        assert warning.details == {
            "user_id": funded_user.pk,
            "balance": 15,
            "ledger_total": 10,
            "difference": 5,
        }


class TestHistoryStats:
    """Tests for LedgerService.history_stats()."""

    def test_totals_per_kind(self, funded_user, failed_analysis):
        LedgerService.refund_analysis(failed_analysis)
        entry = LedgerService.open_purchase(funded_user, 1000, external_payment_ref="p1")
        with transaction.atomic():
            LedgerService.complete_purchase(entry)
        LedgerService.open_purchase(funded_user, 3000, external_payment_ref="p2")

        stats = LedgerService.history_stats(funded_user.credit_transactions.all())

        assert stats.to_dict() == {
            "total_purchased": 1000,
            "total_used": 3,
            "total_refunded": 3,
            "total_bonus": 10,
        }
        assert stats.net == balance_of(funded_user)

    def test_empty_history(self, user):
        stats = LedgerService.history_stats(user.credit_transactions.all())

        assert stats.net == 0
        assert stats.total_used == 0
