"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User manager, fields and credential state
- test_validators.py: CPF, phone and password validators
- test_services.py: AuthService and AccountProvisioner tests
- test_views.py: API endpoint tests

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_services.py
"""
