"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures in each credential state
- Registration payloads

The API client fixtures (api_client, authenticated_client,
authenticated_client_factory) come from app/conftest.py.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get('/api/v1/auth/profile/')
        assert response.status_code == 200
"""

import pytest

from authentication.models import User
from authentication.tests.factories import PendingUserFactory, UserFactory
from authentication.types import PayerProfile


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic active user with an empty balance."""
    return UserFactory()


@pytest.fixture
def pending_user(db):
    """Create an account provisioned from a payment (setup not completed)."""
    return PendingUserFactory()


@pytest.fixture
def suspended_user(db):
    """Create a suspended user (password is valid, login refused)."""
    return UserFactory(credential_state="suspended")


@pytest.fixture
def deactivated_user(db):
    """Create a deactivated user (is_active=False)."""
    return UserFactory(is_active=False)


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com", password="AdminPass123"
    )


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def valid_registration_data():
    """Valid data for the registration endpoint."""
    return {
        "name": "Ana Souza",
        "email": "ana@example.com",
        "password": "Secret123",
        "national_id": "529.982.247-25",
        "phone": "(11) 98765-4321",
    }


@pytest.fixture
def payer_profile():
    """Payer identity as the payment processor reports it."""
    return PayerProfile(
        national_id="111.444.777-35",
        name="Bruno Lima",
        email="bruno@example.com",
        phone="11 91234-5678",
        plan_tier="complete",
    )
