"""
Root pytest configuration for the Django project.

This module points Django at the settings module and fills in the
environment a developer machine may lack (secret key, in-memory SQLite).
Shared fixtures and test markers live in app/conftest.py; app-specific
fixtures in each app's tests/conftest.py.
"""

import os

import django

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("CACHE_URL", "locmemcache://")
os.environ.setdefault("PAYMENT_WEBHOOK_SECRET", "test-payment-secret")
os.environ.setdefault("ACCOUNT_SETUP_URL", "https://app.example.com/setup-password/{token}")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()
