"""
Small infrastructure helpers.

Usage:
    from core.helpers import digits_only, generate_token, get_client_ip

    token = generate_token(16)
    ip = get_client_ip(request)
    cpf = digits_only("123.456.789-09")  # "12345678909"
"""

from __future__ import annotations

import hmac
import re
import secrets
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from django.http import HttpRequest

_NON_DIGITS = re.compile(r"\D")


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of random bytes (the hex string is twice as long)

    Returns:
        Hexadecimal token string
    """
    return secrets.token_hex(length)


def digits_only(value: str | None) -> str:
    """Strip every non-digit character ("(11) 98765-4321" -> "11987654321")."""
    return _NON_DIGITS.sub("", value or "")


def secrets_match(provided: str | None, expected: str | None) -> bool:
    """
    Compare a presented shared secret with the configured one.

    Constant-time comparison. An unset expected secret never matches, so a
    missing configuration fails closed.
    """
    if not expected or provided is None:
        return False
    return hmac.compare_digest(str(provided).encode(), str(expected).encode())


def get_client_ip(request: HttpRequest) -> str:
    """
    Extract client IP from request, handling proxies.

    Args:
        request: Django HTTP request

    Returns:
        First address of X-Forwarded-For, or REMOTE_ADDR
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")
