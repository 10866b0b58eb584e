"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    ├── NotFoundError - Resource not found (analysis, account, plan)
    ├── ForbiddenError - Caller failed authentication of a shared secret
    ├── ConflictError - Duplicate identifiers, invalid state transitions
    └── StorageUnavailableError - Database unreachable, operation not applied

Usage:
    from core.exceptions import ConflictError, NotFoundError

    raise NotFoundError(
        f"Analysis {analysis_id} not found",
        error_code="ANALYSIS_NOT_FOUND",
        details={"analysis_id": str(analysis_id)},
    )

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=error_status(e.error_code))

Note:
    Services convert these into ServiceResult failures at their public
    boundary (ServiceResult.from_error). Views never see raw exceptions
    from the ledger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (amounts, ids, field errors)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when service-level input validation fails.

    Example:
        raise ValidationError(
            f"Unknown analysis tier '{tier}'",
            details={"tier": tier, "allowed": ["basic", "complete"]},
        )

    Note:
        Request-shape validation belongs to DRF serializers. Use this for
        rules that only the service can check.
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Subclasses usually override the error code with a resource-specific one
    (ANALYSIS_NOT_FOUND, PLAN_NOT_FOUND, ACCOUNT_NOT_FOUND).
    """

    default_error_code: str = "NOT_FOUND"


class ForbiddenError(BaseApplicationError):
    """
    Raised when a webhook sender presents the wrong shared secret.

    Nothing may be read or written on behalf of the caller once this is
    raised. HTTP 403 is the appropriate status.
    """

    default_error_code: str = "FORBIDDEN"


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate e-mail or national id
    - Invalid state transitions

    Example:
        if User.objects.filter(email=email).exclude(pk=user.pk).exists():
            raise ConflictError(
                "Email already registered",
                details={"field": "email"},
            )

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"


class StorageUnavailableError(BaseApplicationError):
    """
    Raised when the database could not be reached.

    The surrounding transaction has been rolled back, so the operation
    counts as not applied and the caller may retry. The driver message is
    logged but never copied into the error.
    """

    default_error_code: str = "STORAGE_UNAVAILABLE"
