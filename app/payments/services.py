"""
Payment services.

This module provides:
- PaymentReconciler: Applies payment processor notifications to the ledger
- CheckoutService: Starts a purchase of a credit plan

Related files:
    - ledger/services.py: LedgerService, the only writer of balances
    - webhooks/views.py: HTTP entry point for processor notifications
    - authentication/services.py: AccountProvisioner for unknown payers

Idempotency:
    The processor delivers notifications at least once. The purchase row is
    keyed by external_payment_ref (unique) and locked while it is settled,
    so a redelivery of a settled payment is a no-op.

Usage:
    from payments.services import PaymentReconciler
    from payments.types import PaymentNotification

    result = PaymentReconciler.apply_payment(
        PaymentNotification(
            external_payment_ref="tx1",
            payer_national_id="52998224725",
            outcome="aprovado",
            credits=1000,
            shared_secret=secret,
        )
    )
    if result.success:
        print(result.data.transaction.status)  # "completed"
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import IntegrityError

from authentication.models import User
from authentication.services import AccountProvisioner
from authentication.types import PayerProfile
from core.exceptions import BaseApplicationError, ConflictError, ForbiddenError
from core.helpers import secrets_match
from core.services import BaseService, ServiceResult
from payments.exceptions import PlanNotFoundError, UnknownPayerError
from payments.ledger.models import (
    CreditTransaction,
    TransactionKind,
    TransactionStatus,
)
from payments.ledger.services import LedgerService
from payments.models import Plan
from payments.types import (
    CheckoutSession,
    PaymentApplication,
    PaymentNotification,
    PaymentOutcome,
)


logger = logging.getLogger(__name__)


class PaymentReconciler(BaseService):
    """
    Idempotent top-up of accounts from payment notifications.

    Outcome handling for a pending purchase row:
        approved -> completed, account credited
        cancelled / refunded -> failed, balance unchanged
        anything else -> stays pending, raw outcome recorded in metadata

    A row that is already completed or failed is never touched again.
    """

    # Concurrent first deliveries of the same ref: one insert wins, the
    # other re-reads the winning row.
    MAX_ATTEMPTS = 2

    @classmethod
    def apply_payment(
        cls, notification: PaymentNotification
    ) -> ServiceResult[PaymentApplication]:
        """
        Apply one payment notification.

        Args:
            notification: Parsed processor delivery

        Returns:
            ServiceResult with a PaymentApplication. Failures: FORBIDDEN
            (wrong secret, nothing read or written), VALIDATION_ERROR,
            UNKNOWN_PAYER, CONFLICT, STORAGE_UNAVAILABLE
        """
        if not secrets_match(
            notification.shared_secret, settings.PAYMENT_WEBHOOK_SECRET
        ):
            logger.warning(
                "Payment notification rejected: invalid shared secret",
                extra={"external_payment_ref": notification.external_payment_ref},
            )
            return ServiceResult.from_error(
                ForbiddenError("Invalid webhook secret")
            )

        missing = cls.validate_required(
            external_payment_ref=notification.external_payment_ref,
            payer_national_id=notification.payer_national_id,
            outcome=notification.outcome,
        )
        if missing is not None:
            return missing

        for attempt in range(1, cls.MAX_ATTEMPTS + 1):
            try:
                with cls.atomic():
                    application = cls._apply_locked(notification)
            except IntegrityError:
                logger.info(
                    "Concurrent delivery of payment detected, retrying",
                    extra={
                        "external_payment_ref": notification.external_payment_ref,
                        "attempt": attempt,
                    },
                )
                continue
            except BaseApplicationError as exc:
                logger.info(
                    "Payment notification not applied",
                    extra={
                        "external_payment_ref": notification.external_payment_ref,
                        "error_code": exc.error_code,
                    },
                )
                return ServiceResult.from_error(exc)

            application.setup_url = AccountProvisioner.setup_url(application.user)
            return ServiceResult.success(application)

        return ServiceResult.from_error(
            ConflictError(
                "Payment is being processed by another request",
                details={"external_payment_ref": notification.external_payment_ref},
            )
        )

    @classmethod
    def _apply_locked(cls, notification: PaymentNotification) -> PaymentApplication:
        ref = notification.external_payment_ref
        outcome = notification.normalized_outcome

        entry = (
            CreditTransaction.objects.select_for_update()
            .filter(external_payment_ref=ref)
            .first()
        )

        if entry is None:
            user = cls._resolve_payer(notification, outcome)
            entry = LedgerService.open_purchase(
                user,
                amount=notification.credits,
                external_payment_ref=ref,
                plan=notification.plan,
                description=f"Purchase of {notification.credits} credits - {ref}",
                metadata={
                    "original_status": notification.outcome,
                    "original_amount": notification.price,
                },
            )
            logger.info(
                "Purchase recorded from payment notification",
                extra={"transaction_id": str(entry.pk), "user_id": user.pk},
            )
        elif entry.kind != TransactionKind.PURCHASE:
            raise ConflictError(
                "Payment reference belongs to a non-purchase entry",
                details={"external_payment_ref": ref},
            )
        else:
            # The owner of an existing row is authoritative
            user = entry.user

        if entry.status != TransactionStatus.PENDING:
            logger.info(
                "Payment already settled, ignoring notification",
                extra={
                    "transaction_id": str(entry.pk),
                    "status": entry.status,
                    "outcome": outcome,
                },
            )
            return PaymentApplication(transaction=entry, user=user, applied=False)

        if outcome == PaymentOutcome.APPROVED:
            LedgerService.complete_purchase(entry, amount=notification.credits or None)
        elif outcome in (PaymentOutcome.CANCELLED, PaymentOutcome.REFUNDED):
            LedgerService.fail_purchase(entry)
        else:
            entry.merge_meta({"last_outcome": notification.outcome})
            entry.save(update_fields=["metadata", "updated_at"])
            logger.info(
                "Payment left pending",
                extra={"transaction_id": str(entry.pk), "outcome": outcome},
            )

        user.refresh_from_db(fields=["credits", "credential_state"])
        return PaymentApplication(transaction=entry, user=user)

    @classmethod
    def _resolve_payer(cls, notification: PaymentNotification, outcome: str) -> User:
        user = User.objects.filter(national_id=notification.payer_national_id).first()
        if user is not None:
            return user

        if outcome != PaymentOutcome.APPROVED:
            raise UnknownPayerError(
                "No account for payer and payment is not approved",
                details={"external_payment_ref": notification.external_payment_ref},
            )

        profile = notification.payer or PayerProfile(
            national_id=notification.payer_national_id,
            plan_tier=notification.plan,
        )
        return AccountProvisioner.create_pending_account(profile)


class CheckoutService(BaseService):
    """Starts purchases of catalogue plans."""

    @classmethod
    def start_checkout(cls, user: User, plan_id: int) -> ServiceResult[CheckoutSession]:
        """
        Create a pending purchase for a plan.

        The row's own id becomes its external_payment_ref, so the processor
        notification for this checkout settles the same row.

        Args:
            user: Buyer
            plan_id: Plan primary key

        Returns:
            ServiceResult with a CheckoutSession, or PLAN_NOT_FOUND
        """
        plan = Plan.objects.active().filter(pk=plan_id).first()
        if plan is None:
            return ServiceResult.from_error(
                PlanNotFoundError(
                    "Plan not found",
                    details={"plan_id": plan_id},
                )
            )

        try:
            with cls.atomic():
                entry = LedgerService.open_purchase(
                    user,
                    amount=plan.credits,
                    plan=plan.type,
                    description=f"Purchase of {plan.name}",
                    metadata={
                        "plan_id": plan.pk,
                        "plan_name": plan.name,
                        "price": str(plan.price),
                    },
                )
                entry.external_payment_ref = str(entry.pk)
                entry.save(update_fields=["external_payment_ref", "updated_at"])
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        logger.info(
            "Checkout started",
            extra={
                "transaction_id": str(entry.pk),
                "user_id": user.pk,
                "plan": plan.type,
            },
        )
        return ServiceResult.success(
            CheckoutSession(
                transaction=entry,
                plan=plan,
                payment_data={
                    "transaction_id": entry.external_payment_ref,
                    "user_id": user.pk,
                    "amount": str(plan.price),
                    "plan": plan.type,
                    "credits": plan.credits,
                },
            )
        )
