"""
Pytest fixtures for payment tests.

Sections:
    - Account Fixtures: registered payers
    - Plan Fixtures: catalogue plans
    - Settings Fixtures: webhook secret
"""

import pytest

from authentication.tests.factories import UserFactory
from payments.models import PlanType
from payments.tests.factories import PlanFactory


WEBHOOK_SECRET = "test-payment-secret"


# ==========================================================================
# Settings Fixtures
# ==========================================================================


@pytest.fixture(autouse=True)
def payment_webhook_secret(settings):
    """Pin the shared secret so tests do not depend on the environment."""
    settings.PAYMENT_WEBHOOK_SECRET = WEBHOOK_SECRET
    return WEBHOOK_SECRET


# ==========================================================================
# Account Fixtures
# ==========================================================================


@pytest.fixture
def user(db):
    """Registered payer with an empty balance."""
    return UserFactory()


@pytest.fixture
def payer(db):
    """Registered account whose CPF the processor reports."""
    return UserFactory(national_id="52998224725")


# ==========================================================================
# Plan Fixtures
# ==========================================================================


@pytest.fixture
def basic_plan(db):
    return PlanFactory(type=PlanType.BASIC, name="Plano Básico", credits=1000)


@pytest.fixture
def complete_plan(db):
    return PlanFactory(
        type=PlanType.COMPLETE,
        name="Plano Completo",
        price="59.90",
        credits=3000,
        sort_order=2,
    )


@pytest.fixture
def inactive_plan(db):
    return PlanFactory(type=PlanType.CREDITS_PACK, is_active=False, sort_order=3)
