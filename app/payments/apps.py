"""
Payments app configuration.

This app provides:
- The credit ledger (payments.ledger)
- Credit plans and checkout
- Payment processor webhook reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
