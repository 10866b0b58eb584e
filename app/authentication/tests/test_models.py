"""
Tests for the User model.

Covers:
- Manager behaviour (email normalization, unusable passwords, superusers)
- The non-negative credits constraint
- Credential state transitions
- can_authenticate and display helpers
"""

import pytest
from django.db import IntegrityError, transaction
from django_fsm import TransitionNotAllowed

from authentication.models import CredentialState, PlanTier, User
from authentication.tests.factories import PendingUserFactory, UserFactory


# =============================================================================
# Manager
# =============================================================================


class TestUserManager:
    """Tests for UserManager.create_user() / create_superuser()."""

    def test_create_user_normalizes_email_domain(self, db):
        """Domain part of the email is lowercased."""
        user = User.objects.create_user(email="Ana@EXAMPLE.COM", password="Secret123")

        assert user.email == "Ana@example.com"

    def test_create_user_without_password_is_unusable(self, db):
        """Accounts created without a password cannot log in with any password."""
        user = User.objects.create_user(email="p@example.com", password=None)

        assert user.has_usable_password() is False

    def test_create_user_requires_email(self, db):
        """Empty email is rejected before touching the database."""
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="Secret123")

    def test_create_superuser_sets_flags(self, db):
        """Superusers are staff and superuser."""
        admin = User.objects.create_superuser(
            email="root@example.com", password="Secret123"
        )

        assert admin.is_staff is True
        assert admin.is_superuser is True

    def test_active_excludes_deactivated(self, db):
        """active() only returns accounts that were not soft-deleted."""
        active = UserFactory()
        UserFactory(is_active=False)

        assert list(User.objects.active()) == [active]


# =============================================================================
# Fields & Constraints
# =============================================================================


class TestUserFields:
    """Defaults and database constraints."""

    def test_defaults(self, user):
        """New accounts start active, free tier, zero credits."""
        assert user.credits == 0
        assert user.plan_tier == PlanTier.FREE
        assert user.credential_state == CredentialState.ACTIVE
        assert user.has_placeholder_email is False
        assert user.preferences == {"notifications": True, "email_marketing": False}

    def test_credits_cannot_go_negative(self, user):
        """The check constraint rejects a negative balance."""
        with pytest.raises(IntegrityError), transaction.atomic():
            User.objects.filter(pk=user.pk).update(credits=-1)

    def test_national_id_is_unique(self, user):
        """Two accounts cannot share a CPF."""
        with pytest.raises(IntegrityError), transaction.atomic():
            UserFactory(national_id=user.national_id)

    def test_multiple_accounts_without_national_id(self, db):
        """NULL national ids do not collide."""
        UserFactory(national_id=None)
        UserFactory(national_id=None)

        assert User.objects.filter(national_id__isnull=True).count() == 2

    def test_str_is_email(self, user):
        assert str(user) == user.email


class TestDisplayNames:
    """get_full_name() / get_short_name()."""

    def test_full_name_falls_back_to_email(self, db):
        user = UserFactory(name="")

        assert user.get_full_name() == user.email

    def test_short_name_is_first_word(self, db):
        user = UserFactory(name="Ana Maria Souza")

        assert user.get_short_name() == "Ana"

    def test_short_name_without_name_is_email_local_part(self, db):
        user = UserFactory(name="", email="ana.souza@example.com")

        assert user.get_short_name() == "ana.souza"


# =============================================================================
# Credential State
# =============================================================================


class TestCredentialState:
    """Transitions of the credential_state FSM field."""

    def test_pending_account_cannot_authenticate(self, db):
        user = PendingUserFactory()

        assert user.can_authenticate is False
        assert user.has_usable_password() is False

    def test_activate_moves_pending_to_active(self, db):
        user = PendingUserFactory()

        user.activate()

        assert user.credential_state == CredentialState.ACTIVE
        assert user.can_authenticate is True

    def test_activate_refused_for_active_account(self, user):
        """Setup cannot be completed twice."""
        with pytest.raises(TransitionNotAllowed):
            user.activate()

    def test_suspend_and_reinstate(self, user):
        user.suspend()
        assert user.can_authenticate is False

        user.reinstate()
        assert user.can_authenticate is True

    def test_deactivated_account_cannot_authenticate(self, deactivated_user):
        assert deactivated_user.can_authenticate is False
