"""
Account services.

This module provides:
- AuthService: Registration, settings updates and self-service deactivation
- AccountProvisioner: Placeholder accounts created from payments, and the
  setup step that turns them into normal accounts

Related files:
    - models.py: User and CredentialState
    - types.py: PayerProfile
    - payments/services.py: PaymentReconciler, the caller of the provisioner

Security:
    - Placeholder accounts get an unusable password
    - Setup links are signed with SECRET_KEY and expire
    - Duplicate identifiers are rejected with CONFLICT, never merged
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings
from django.core import signing
from django.db import IntegrityError, transaction

from authentication.exceptions import (
    AccountNotFoundError,
    AlreadyActiveError,
    InvalidPasswordError,
    InvalidSetupTokenError,
)
from authentication.models import CredentialState, PlanTier, User
from core.exceptions import BaseApplicationError, ConflictError
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.types import PayerProfile

logger = logging.getLogger(__name__)

SETUP_TOKEN_SALT = "authentication.account-setup"


class AuthService(BaseService):
    """
    Self-service account operations.

    Usage:
        result = AuthService.register(
            email="ana@example.com",
            password="Secret123",
            name="Ana",
            national_id="52998224725",
            phone="11987654321",
        )
        if result.success:
            user = result.data
    """

    @classmethod
    def register(
        cls,
        email: str,
        password: str,
        name: str,
        national_id: str,
        phone: str = "",
    ) -> ServiceResult[User]:
        """
        Create an active account.

        Args:
            email: Login email (already validated)
            password: Raw password (already validated)
            name: Display name
            national_id: CPF digits (already validated)
            phone: Phone digits

        Returns:
            ServiceResult with the new User, or CONFLICT when the email or
            national id is already registered
        """
        email = User.objects.normalize_email(email).lower()

        if User.objects.filter(email__iexact=email).exists():
            return ServiceResult.failure(
                "Email already registered",
                error_code="CONFLICT",
                details={"field": "email"},
            )
        if User.objects.filter(national_id=national_id).exists():
            return ServiceResult.failure(
                "CPF already registered",
                error_code="CONFLICT",
                details={"field": "national_id"},
            )

        try:
            with cls.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=password,
                    name=name,
                    national_id=national_id,
                    phone=phone,
                    credential_state=CredentialState.ACTIVE,
                )
        except IntegrityError:
            return ServiceResult.failure(
                "Email or CPF already registered",
                error_code="CONFLICT",
            )
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        logger.info(
            "User registered",
            extra={"user_id": user.pk},
        )
        return ServiceResult.success(user)

    @classmethod
    def update_settings(
        cls,
        user: User,
        name: str | None = None,
        phone: str | None = None,
        preferences: dict | None = None,
    ) -> ServiceResult[User]:
        """
        Update name, phone and preferences.

        Preferences are merged into the stored dict, so clients may send a
        single key.
        """
        update_fields = ["updated_at"]
        if name is not None:
            user.name = name
            update_fields.append("name")
        if phone is not None:
            user.phone = phone
            update_fields.append("phone")
        if preferences is not None:
            user.preferences = {**(user.preferences or {}), **preferences}
            update_fields.append("preferences")

        user.save(update_fields=update_fields)
        return ServiceResult.success(user)

    @classmethod
    def deactivate(cls, user: User, password: str) -> ServiceResult[User]:
        """
        Soft-delete the account after confirming the current password.

        The row, its balance and its ledger are kept.
        """
        if not user.check_password(password):
            return ServiceResult.from_error(
                InvalidPasswordError("Incorrect password")
            )

        user.is_active = False
        user.save(update_fields=["is_active", "updated_at"])
        logger.info("User deactivated account", extra={"user_id": user.pk})
        return ServiceResult.success(user)


class AccountProvisioner(BaseService):
    """
    Accounts created for payers who have not registered yet.

    A payment notification can arrive for a CPF nobody registered. The
    account is created in the pending credential state with an unusable
    password, and the payer later finishes setup through a signed link.

    Usage:
        user = AccountProvisioner.create_pending_account(profile)
        url = AccountProvisioner.setup_url(user)

        result = AccountProvisioner.complete_setup(
            user_id=user.pk, password="Secret123", email="ana@example.com"
        )
    """

    @staticmethod
    def placeholder_email(national_id: str) -> str:
        """Generated contact address for a payer that sent no usable email."""
        return f"user_{national_id}@{settings.PLACEHOLDER_EMAIL_DOMAIN}"

    @classmethod
    def create_pending_account(cls, profile: PayerProfile) -> User:
        """
        Create (or return the concurrently created) pending account.

        Runs inside the caller's transaction. The balance starts at zero;
        the caller credits it through the ledger.

        Args:
            profile: Payer identity from the payment processor

        Returns:
            The pending User for profile.national_id
        """
        email = profile.email
        placeholder = not email or User.objects.filter(email__iexact=email).exists()
        if placeholder:
            email = cls.placeholder_email(profile.national_id)

        plan_tier = profile.plan_tier if profile.plan_tier in PlanTier.values else PlanTier.FREE

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=email,
                    password=None,
                    name=profile.name,
                    national_id=profile.national_id,
                    phone=profile.phone,
                    plan_tier=plan_tier,
                    credential_state=CredentialState.PENDING,
                    has_placeholder_email=placeholder,
                )
        except IntegrityError:
            # Another delivery provisioned the same payer first
            return User.objects.get(national_id=profile.national_id)

        logger.info(
            "Provisioned pending account from payment",
            extra={
                "user_id": user.pk,
                "has_placeholder_email": placeholder,
            },
        )
        return user

    @classmethod
    def provision_from_payment(cls, profile: PayerProfile) -> ServiceResult[User]:
        """
        Create a pending account for an unknown payer.

        Returns:
            ServiceResult with the pending User
        """
        try:
            with cls.atomic():
                user = cls.create_pending_account(profile)
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)
        return ServiceResult.success(user)

    @classmethod
    def complete_setup(
        cls,
        user_id: int,
        password: str,
        email: str | None = None,
    ) -> ServiceResult[User]:
        """
        Give a pending account its real password and, optionally, email.

        Args:
            user_id: Pending account id
            password: New raw password (already validated)
            email: Replacement for the placeholder email

        Returns:
            ServiceResult with the activated User. Failures:
            ACCOUNT_NOT_FOUND, ALREADY_ACTIVE, CONFLICT (email taken)
        """
        try:
            with cls.atomic():
                user = cls._complete_setup_locked(user_id, password, email)
        except IntegrityError:
            return ServiceResult.from_error(
                ConflictError("Email already registered", details={"field": "email"})
            )
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        logger.info("Account setup completed", extra={"user_id": user.pk})
        return ServiceResult.success(user)

    @classmethod
    def _complete_setup_locked(
        cls, user_id: int, password: str, email: str | None
    ) -> User:
        user = User.objects.select_for_update().filter(pk=user_id).first()
        if user is None:
            raise AccountNotFoundError(
                f"Account {user_id} not found",
                details={"user_id": user_id},
            )
        if user.credential_state != CredentialState.PENDING:
            raise AlreadyActiveError(
                "Account setup was already completed",
                details={"credential_state": user.credential_state},
            )

        if email:
            email = User.objects.normalize_email(email).lower()
            if User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
                raise ConflictError(
                    "Email already registered",
                    details={"field": "email"},
                )
            user.email = email
            user.has_placeholder_email = False

        user.set_password(password)
        user.activate()
        user.save()
        return user

    # =========================================================================
    # Setup links
    # =========================================================================

    @staticmethod
    def make_setup_token(user: User) -> str:
        """Signed, timestamped token identifying a pending account."""
        return signing.dumps({"user_id": user.pk}, salt=SETUP_TOKEN_SALT)

    @staticmethod
    def user_id_from_setup_token(token: str) -> int:
        """
        Decode a setup token.

        Raises:
            InvalidSetupTokenError: If the token is tampered or expired
        """
        try:
            payload = signing.loads(
                token,
                salt=SETUP_TOKEN_SALT,
                max_age=settings.ACCOUNT_SETUP_TOKEN_MAX_AGE,
            )
        except signing.BadSignature as exc:
            raise InvalidSetupTokenError("Setup link is invalid or expired") from exc
        return payload["user_id"]

    @classmethod
    def setup_url(cls, user: User) -> str | None:
        """Password setup URL for a pending account, None otherwise."""
        if user.credential_state != CredentialState.PENDING:
            return None
        return settings.ACCOUNT_SETUP_URL.format(token=cls.make_setup_token(user))
