"""
Payment-specific exceptions.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── UnknownPayerError - Non-approved notification for an unknown payer
    └── PlanNotFoundError - Checkout for a missing or inactive plan

Usage:
    from payments.exceptions import UnknownPayerError

    raise UnknownPayerError(
        "No account for payer",
        details={"external_payment_ref": ref},
    )
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, NotFoundError


class PaymentError(BaseApplicationError):
    """Base exception for payment domain errors."""

    default_error_code: str = "PAYMENT_ERROR"


class UnknownPayerError(PaymentError, NotFoundError):
    """
    Raised when a notification names a payer with no account and the
    payment was not approved.

    Accounts are only provisioned for approved payments, so nothing is
    written in this case.
    """

    default_error_code: str = "UNKNOWN_PAYER"


class PlanNotFoundError(PaymentError, NotFoundError):
    """Raised when a plan does not exist or is not on sale."""

    default_error_code: str = "PLAN_NOT_FOUND"
