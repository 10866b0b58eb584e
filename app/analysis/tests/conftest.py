"""
Pytest fixtures for analysis tests.

Sections:
    - Account Fixtures: users with and without credits
    - Analysis Fixtures: analyses in each status
"""

import pytest

from analysis.services import ReservationService
from analysis.tests.factories import AnalysisFactory, CompletedAnalysisFactory
from authentication.tests.factories import UserFactory
from payments.ledger.services import LedgerService


# ==========================================================================
# Account Fixtures
# ==========================================================================


@pytest.fixture
def user(db):
    """
    Account holding 10 credits backed by a bonus row.

    The balance matches the ledger, so ledger-sum assertions hold.
    """
    account = UserFactory()
    LedgerService.grant_bonus(account, 10, description="Test credits")
    account.refresh_from_db()
    return account


@pytest.fixture
def broke_user(db):
    """Account with no credits."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """A second account, for ownership checks."""
    return UserFactory()


# ==========================================================================
# Analysis Fixtures
# ==========================================================================


@pytest.fixture
def reserved_analysis(user):
    """
    Complete-tier analysis reserved through the service.

    Leaves the user with 7 credits and one usage row.
    """
    result = ReservationService.reserve(user, "complete")
    assert result.success
    user.refresh_from_db()
    return result.data


@pytest.fixture
def pending_analysis(user):
    """Pending analysis with no ledger rows."""
    return AnalysisFactory(owner=user)


@pytest.fixture
def completed_analysis(user):
    """Completed private analysis with a report."""
    return CompletedAnalysisFactory(owner=user)


@pytest.fixture
def public_analysis(user):
    """Completed analysis shared by its owner."""
    analysis = CompletedAnalysisFactory(owner=user)
    analysis.set_public(True)
    analysis.save(update_fields=["is_public", "share_token"])
    return analysis
