"""
Data types exchanged with the account services.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.helpers import digits_only

# Column sizes of the matching User fields
NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 11


@dataclass
class PayerProfile:
    """
    Payer identity as reported by the payment processor.

    Attributes:
        national_id: CPF of the payer (formatting is stripped)
        name: Payer name, may be blank (cut to NAME_MAX_LENGTH)
        email: Payer email, may be blank
        phone: Payer phone, may be blank
        plan_tier: Plan label bought, if the processor reports one

    Raises:
        ValueError: If national_id has no digits or phone has more than
            PHONE_MAX_LENGTH digits
    """

    national_id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    plan_tier: str = ""

    def __post_init__(self):
        self.national_id = digits_only(self.national_id)
        if not self.national_id:
            raise ValueError("national_id is required")
        self.phone = digits_only(self.phone)
        if len(self.phone) > PHONE_MAX_LENGTH:
            raise ValueError(f"phone must have at most {PHONE_MAX_LENGTH} digits")
        self.email = (self.email or "").strip().lower()
        self.name = (self.name or "").strip()[:NAME_MAX_LENGTH]
