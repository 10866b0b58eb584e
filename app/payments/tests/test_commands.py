"""
Tests for the payments management commands.
"""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from payments.ledger.models import CreditTransaction, TransactionKind
from payments.management.commands.seed_plans import DEFAULT_PLANS
from payments.models import Plan


class TestSeedPlans:
    def test_creates_default_plans(self, db):
        call_command("seed_plans", stdout=StringIO())

        assert Plan.objects.active().count() == len(DEFAULT_PLANS)
        pack = Plan.objects.get(type="credits_pack")
        assert pack.credits == 5000
        assert pack.discount == 20

    def test_is_idempotent(self, db):
        call_command("seed_plans", stdout=StringIO())
        Plan.objects.filter(type="basic").update(credits=1, is_active=False)

        call_command("seed_plans", stdout=StringIO())

        assert Plan.objects.count() == len(DEFAULT_PLANS)
        basic = Plan.objects.get(type="basic")
        assert basic.credits == 1000
        assert basic.is_active is True


class TestGrantCredits:
    def test_grant_by_email(self, user):
        out = StringIO()

        call_command("grant_credits", user.email, "25", reason="Support", stdout=out)

        user.refresh_from_db()
        assert user.credits == 25
        assert "balance is now 25" in out.getvalue()
        entry = CreditTransaction.objects.get(user=user)
        assert entry.kind == TransactionKind.BONUS
        assert entry.description == "Support"

    def test_grant_by_formatted_cpf(self, payer):
        call_command("grant_credits", "529.982.247-25", "5", stdout=StringIO())

        payer.refresh_from_db()
        assert payer.credits == 5

    def test_unknown_account(self, db):
        with pytest.raises(CommandError):
            call_command("grant_credits", "ghost@example.com", "5", stdout=StringIO())

    def test_non_positive_amount(self, user):
        with pytest.raises(CommandError):
            call_command("grant_credits", user.email, "0", stdout=StringIO())

        user.refresh_from_db()
        assert user.credits == 0
