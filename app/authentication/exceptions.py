"""
Account-related exceptions.

Exception Hierarchy:
    BaseApplicationError
    ├── NotFoundError
    │   └── AccountNotFoundError - Unknown account id
    ├── ConflictError
    │   └── AlreadyActiveError - Setup attempted on a non-pending account
    └── ValidationError
        ├── InvalidSetupTokenError - Bad or expired setup link
        └── InvalidPasswordError - Password confirmation failed
"""

from core.exceptions import ConflictError, NotFoundError, ValidationError


class AccountNotFoundError(NotFoundError):
    """Raised when an account id does not exist."""

    default_error_code: str = "ACCOUNT_NOT_FOUND"


class AlreadyActiveError(ConflictError):
    """
    Raised when setup completion is requested for an account that is not
    pending. The account is left untouched.
    """

    default_error_code: str = "ALREADY_ACTIVE"


class InvalidSetupTokenError(ValidationError):
    """Raised when an account setup token is malformed, tampered or expired."""

    default_error_code: str = "INVALID_SETUP_TOKEN"


class InvalidPasswordError(ValidationError):
    """Raised when the current password given for confirmation is wrong."""

    default_error_code: str = "INVALID_PASSWORD"
