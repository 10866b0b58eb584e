"""
Validators for Brazilian account identifiers and passwords.

- validate_cpf: CPF with check digits
- validate_mobile_phone: 10 or 11 digits, 11-digit numbers must be mobile
- validate_password_strength: at least 6 chars with lower, upper and digit

All validators raise django.core.exceptions.ValidationError so they work on
model fields and inside DRF serializers.
"""

import re

from django.core.exceptions import ValidationError

from core.helpers import digits_only

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")
PASSWORD_MIN_LENGTH = 6


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def is_valid_cpf(value: str) -> bool:
    """Return True when value is an 11-digit CPF with valid check digits."""
    cpf = digits_only(value)
    if len(cpf) != 11 or cpf == cpf[0] * 11:
        return False
    return (
        _cpf_check_digit(cpf[:9]) == int(cpf[9])
        and _cpf_check_digit(cpf[:10]) == int(cpf[10])
    )


def validate_cpf(value):
    """Reject CPFs with the wrong length, repeated digits or bad check digits."""
    if not is_valid_cpf(value):
        raise ValidationError("Invalid CPF.", code="invalid_cpf")


def validate_mobile_phone(value):
    """
    Validate a Brazilian phone number.

    Accepts 10 digits (area code + landline) or 11 digits where the first
    digit after the area code is 9 (mobile).
    """
    phone = digits_only(value)
    if not re.fullmatch(r"\d{10,11}", phone):
        raise ValidationError(
            "Phone must have 10 or 11 digits.", code="invalid_phone"
        )
    if len(phone) == 11 and phone[2] != "9":
        raise ValidationError(
            "Phone must be a mobile number (starting with 9).",
            code="invalid_phone",
        )


def validate_password_strength(value):
    """Require at least 6 characters with a lowercase, an uppercase and a digit."""
    if len(value or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must have at least {PASSWORD_MIN_LENGTH} characters.",
            code="password_too_short",
        )
    if not PASSWORD_PATTERN.match(value):
        raise ValidationError(
            "Password must contain a lowercase letter, an uppercase letter and a number.",
            code="password_too_weak",
        )
