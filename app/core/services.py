"""
Base service layer patterns shared by every app.

This module provides:
- ServiceResult: Typed success/failure wrapper returned by service methods
- BaseService: Base class with logging, transaction and error helpers

Service Layer Philosophy:
    Views handle HTTP, models hold data, services hold the credit rules.
    Expected outcomes (insufficient credits, unknown payer, duplicate e-mail)
    come back as ServiceResult failures with a stable error_code. Only
    programming errors propagate as exceptions.

Usage:
    from core.services import BaseService, ServiceResult

    class ReservationService(BaseService):
        @classmethod
        def reserve(cls, user, tier) -> ServiceResult[Analysis]:
            try:
                with cls.atomic():
                    analysis = cls._reserve_locked(user, tier)
            except BaseApplicationError as exc:
                return ServiceResult.from_error(exc)
            return ServiceResult.success(analysis)

    # In a view
    result = ReservationService.reserve(request.user, "basic")
    if not result:
        return error_response(result)

Related:
    - core.exceptions: Typed domain errors converted by from_error()
    - core.responses: error_code to HTTP status mapping
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import InterfaceError, OperationalError, transaction

from core.exceptions import BaseApplicationError, StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

T = TypeVar("T")

# Database faults that mean "the store could not be reached", as opposed to
# integrity errors which the services handle themselves.
STORAGE_ERRORS = (OperationalError, InterfaceError)


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result payload when successful
        error: Human-readable error message when failed
        error_code: Machine-readable code (e.g. INSUFFICIENT_CREDITS)
        errors: Field-level validation errors
        details: Structured context for the failure (amounts, ids)

    Example:
        result = ReservationService.reserve(user, "complete")
        if not result.success and result.error_code == "INSUFFICIENT_CREDITS":
            print(result.details["required"], result.details["available"])
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, list[str]] | None = field(default=None)
    details: dict[str, Any] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, list[str]] | None = None,
        details: dict[str, Any] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors (for validation failures)
            details: Structured failure context

        Returns:
            ServiceResult with success=False and error details
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
            details=details,
        )

    @classmethod
    def from_error(cls, exc: BaseApplicationError) -> ServiceResult[T]:
        """
        Convert a typed application error into a failed result.

        The message, error_code and details of the exception are carried
        over unchanged, so callers see the same payload whether a service
        raised internally or returned a failure directly.

        Args:
            exc: The caught BaseApplicationError

        Returns:
            Failed ServiceResult mirroring the exception
        """
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.error_code,
            details=exc.details or None,
        )

    def __bool__(self) -> bool:
        """Allow `if result:` as a shorthand for `if result.success:`."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides:
    - Per-service logger
    - Transaction context manager
    - Conversion of storage faults into STORAGE_UNAVAILABLE results

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns:
            Logger named "<module>.<ClassName>"
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Any exception raised inside the block rolls back every write made
        in it. Storage faults are re-raised as StorageUnavailableError so
        the public service method can turn them into a typed result.

        Raises:
            StorageUnavailableError: If the database connection failed
        """
        try:
            with transaction.atomic():
                yield
        except STORAGE_ERRORS as exc:
            cls.get_logger().error(
                "Storage unavailable, transaction rolled back",
                exc_info=True,
            )
            raise StorageUnavailableError(
                "The ledger store is temporarily unavailable",
            ) from exc

    @classmethod
    def validate_required(cls, **kwargs) -> ServiceResult | None:
        """
        Validate that required fields are provided.

        Args:
            **kwargs: Field names and their values

        Returns:
            ServiceResult.failure if any value is None or blank, None otherwise

        Example:
            missing = cls.validate_required(analysis_id=analysis_id, outcome=outcome)
            if missing is not None:
                return missing
        """
        errors = {}
        for field_name, value in kwargs.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                errors[field_name] = ["This field is required."]

        if errors:
            return ServiceResult.failure(
                "Required fields missing",
                error_code="VALIDATION_ERROR",
                errors=errors,
            )
        return None
