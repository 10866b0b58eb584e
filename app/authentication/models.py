"""
Authentication models.

This module defines the account model of the product:
- User: Email-based login, national id, credit balance and credential state

Related files:
    - managers.py: UserManager for email-based creation
    - services.py: Registration, provisioning and setup completion
    - validators.py: CPF, phone and password rules

Invariants:
    - credits is never negative (database check constraint)
    - credits only changes through payments.ledger.LedgerService
    - a pending account has an unusable password and cannot log in
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django_fsm import FSMField, transition

from authentication.managers import UserManager


class CredentialState(models.TextChoices):
    """
    Whether the account has a usable login secret.

    Flow:
        PENDING -> ACTIVE (setup completed)
        ACTIVE <-> SUSPENDED (administrative action)

    States:
        PENDING: Provisioned from a payment, no password yet
        ACTIVE: Normal login allowed
        SUSPENDED: Login refused until reinstated
    """

    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    SUSPENDED = "suspended", "Suspended"


class PlanTier(models.TextChoices):
    """Commercial plan label shown to the user. Does not gate balance math."""

    FREE = "free", "Free"
    BASIC = "basic", "Basic"
    COMPLETE = "complete", "Complete"
    PREMIUM = "premium", "Premium"


def default_preferences():
    """Initial notification preferences for a new account."""
    return {"notifications": True, "email_marketing": False}


class User(AbstractBaseUser, PermissionsMixin):
    """
    Account holding a credit balance.

    Fields:
        email: Login identifier, unique
        name: Display name
        national_id: CPF (11 digits), unique when present
        phone: Mobile number, digits only
        credits: Current credit balance (never negative)
        plan_tier: Informational plan label
        credential_state: pending / active / suspended
        has_placeholder_email: True while email is a generated placeholder
        preferences: Notification preferences (JSON)
        is_active: Soft-deactivation flag, rows are never deleted
        is_staff: Django admin access
        date_joined / updated_at: Timestamps

    Usage:
        user = User.objects.create_user(
            email="ana@example.com",
            password="Secret123",
            name="Ana",
            national_id="52998224725",
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )
    name = models.CharField(
        max_length=100,
        blank=True,
        help_text="Display name",
    )
    national_id = models.CharField(
        max_length=11,
        unique=True,
        null=True,
        blank=True,
        help_text="CPF, digits only. Identifies the payer in payment webhooks.",
    )
    phone = models.CharField(
        max_length=11,
        blank=True,
        help_text="Mobile phone number, digits only",
    )

    # Credit balance, mutated only through the ledger
    credits = models.PositiveIntegerField(
        default=0,
        help_text="Current credit balance",
    )
    plan_tier = models.CharField(
        max_length=20,
        choices=PlanTier.choices,
        default=PlanTier.FREE,
        help_text="Plan label (informational)",
    )

    credential_state = FSMField(
        default=CredentialState.ACTIVE,
        choices=CredentialState.choices,
        db_index=True,
        help_text="Whether the account has a usable password",
    )
    has_placeholder_email = models.BooleanField(
        default=False,
        help_text="Email was generated at provisioning and must be replaced",
    )
    preferences = models.JSONField(
        default=default_preferences,
        blank=True,
        help_text="Notification preferences",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(credits__gte=0),
                name="user_credits_non_negative",
            ),
        ]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the display name, falling back to the email."""
        return self.name or self.email

    def get_short_name(self):
        """Return the first word of the name, or the email local part."""
        if self.name:
            return self.name.split()[0]
        return self.email.split("@")[0]

    @property
    def can_authenticate(self) -> bool:
        """Whether password login is allowed for this account."""
        return self.is_active and self.credential_state == CredentialState.ACTIVE

    # =========================================================================
    # Credential state transitions
    # =========================================================================

    @transition(
        field=credential_state,
        source=CredentialState.PENDING,
        target=CredentialState.ACTIVE,
    )
    def activate(self):
        """Finish setup of a provisioned account."""

    @transition(
        field=credential_state,
        source=CredentialState.ACTIVE,
        target=CredentialState.SUSPENDED,
    )
    def suspend(self):
        """Block login without deactivating the account."""

    @transition(
        field=credential_state,
        source=CredentialState.SUSPENDED,
        target=CredentialState.ACTIVE,
    )
    def reinstate(self):
        """Lift a suspension."""
