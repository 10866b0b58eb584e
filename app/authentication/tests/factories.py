"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Email login, valid CPF, credit balance, credential state

Usage:
    from authentication.tests.factories import UserFactory, cpf_for

    # Active account with an empty balance
    user = UserFactory()

    # Account with credits
    user = UserFactory(credits=10)

    # Account provisioned from a payment, setup not done yet
    user = PendingUserFactory()
"""

import factory

from authentication.models import CredentialState, User
from authentication.validators import _cpf_check_digit


def cpf_for(n: int) -> str:
    """Deterministic valid CPF derived from a sequence number."""
    base = f"{100000000 + n:09d}"[-9:]
    first = _cpf_check_digit(base)
    second = _cpf_check_digit(f"{base}{first}")
    return f"{base}{first}{second}"


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active accounts with a valid CPF and zero credits.

    Examples:
        # Basic user
        user = UserFactory()

        # User with a balance
        user = UserFactory(credits=10)

        # Inactive user (deactivated)
        user = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Sequence(lambda n: f"User {n}")
    national_id = factory.Sequence(cpf_for)
    phone = "11987654321"
    credits = 0
    credential_state = CredentialState.ACTIVE
    is_active = True
    is_staff = False

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class PendingUserFactory(UserFactory):
    """Account provisioned from a payment: unusable password, placeholder email."""

    email = factory.LazyAttribute(lambda o: f"user_{o.national_id}@placeholder.invalid")
    password = None
    credential_state = CredentialState.PENDING
    has_placeholder_email = True
