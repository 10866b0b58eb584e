"""
Tests for payments app.

This package contains test modules for:
- test_services.py: PaymentReconciler and CheckoutService tests
- test_webhooks.py: Payment processor webhook tests
- test_views.py: Credit API endpoint tests
- test_tasks.py: Ledger audit task tests
- test_commands.py: Management command tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_services.py
"""
