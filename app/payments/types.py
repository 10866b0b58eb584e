"""
Data types for the payment reconciler and checkout.

Types:
    PaymentOutcome: Normalized payment processor status
    PaymentNotification: One delivery from the payment processor
    PaymentApplication: What apply_payment did
    CheckoutSession: Pending purchase plus the payload for the processor
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from core.helpers import digits_only

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User
    from authentication.types import PayerProfile
    from payments.ledger.models import CreditTransaction
    from payments.models import Plan


class PaymentOutcome:
    """Normalized outcome values."""

    APPROVED = "approved"
    PENDING = "pending"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    # Processor statuses are reported in Portuguese
    ALIASES = {
        "aprovado": APPROVED,
        "autorizado": APPROVED,
        "pendente": PENDING,
        "cancelado": CANCELLED,
        "reembolsado": REFUNDED,
    }

    @classmethod
    def normalize(cls, raw: str) -> str:
        value = (raw or "").strip().lower()
        return cls.ALIASES.get(value, value)


@dataclass
class PaymentNotification:
    """
    A payment processor notification.

    Attributes:
        external_payment_ref: Processor transaction id (idempotency key)
        payer_national_id: CPF of the payer
        outcome: Raw processor status
        credits: Credits bought (0 when the processor did not report them)
        shared_secret: Secret sent with the delivery
        payer: Optional identity used to provision an unknown payer
        price: Monetary amount reported by the processor, kept for audit
        plan: Plan label reported by the processor
    """

    external_payment_ref: str
    payer_national_id: str
    outcome: str
    credits: int = 0
    shared_secret: str = ""
    payer: PayerProfile | None = None
    price: str = ""
    plan: str = ""

    def __post_init__(self):
        self.external_payment_ref = str(self.external_payment_ref or "").strip()
        self.payer_national_id = digits_only(self.payer_national_id)
        self.credits = max(int(self.credits or 0), 0)

    @property
    def normalized_outcome(self) -> str:
        return PaymentOutcome.normalize(self.outcome)


@dataclass
class PaymentApplication:
    """
    Result of applying a payment notification.

    Attributes:
        transaction: The purchase ledger row
        user: Account the row belongs to
        applied: False when the delivery was a duplicate of a settled row
        setup_url: Password setup link when the account is still pending
    """

    transaction: CreditTransaction
    user: User
    applied: bool = True
    setup_url: str | None = None


@dataclass
class CheckoutSession:
    """
    A started checkout.

    Attributes:
        transaction: Pending purchase row
        plan: Plan being bought
        payment_data: Fields the client forwards to the payment processor
    """

    transaction: CreditTransaction
    plan: Plan
    payment_data: dict[str, Any] = field(default_factory=dict)
