"""
Pytest fixtures for ledger tests.

Sections:
    - Account Fixtures: users with a known balance
    - Entry Fixtures: pending and settled purchase rows
"""

import pytest

from analysis.tests.factories import AnalysisFactory
from authentication.tests.factories import UserFactory
from payments.ledger.services import LedgerService
from payments.ledger.tests.factories import CreditTransactionFactory


# ==========================================================================
# Account Fixtures
# ==========================================================================


@pytest.fixture
def user(db):
    """Account with an empty balance and no ledger rows."""
    return UserFactory()


@pytest.fixture
def funded_user(db):
    """
    Account holding 10 credits.

    The credits come from a bonus row, so balance and ledger agree.
    """
    account = UserFactory()
    LedgerService.grant_bonus(account, 10)
    account.refresh_from_db()
    return account


# ==========================================================================
# Entry Fixtures
# ==========================================================================


@pytest.fixture
def pending_purchase(user):
    """Pending 1000-credit purchase waiting for the payment processor."""
    return CreditTransactionFactory(user=user, amount=1000)


@pytest.fixture
def failed_analysis(funded_user):
    """
    Failed complete analysis whose 3 credits were debited.

    The usage row is recorded through the ledger, leaving 7 credits.
    """
    analysis = AnalysisFactory(owner=funded_user, tier="complete", status="failed")
    LedgerService.record_usage(funded_user, analysis, 3)
    return analysis
