"""
Authentication application.

Accounts, login and the provisioning of accounts for payers who have not
registered yet.

Key components:
    - User model: Email login, CPF, credit balance, credential state
    - AuthService: Registration, settings, deactivation
    - AccountProvisioner: Pending accounts from payments and their setup

Usage:
    from authentication.models import User
    from authentication.services import AccountProvisioner, AuthService
"""
