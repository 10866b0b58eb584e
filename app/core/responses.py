"""
HTTP rendering of failed service results.

Every service failure carries a machine-readable error_code. This module is
the single place where those codes become HTTP status codes, so views stay
one-liners:

    result = ReservationService.reserve(request.user, tier)
    if not result:
        return error_response(result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import status
from rest_framework.response import Response

if TYPE_CHECKING:
    from core.services import ServiceResult


ERROR_STATUS_CODES = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INSUFFICIENT_CREDITS": status.HTTP_402_PAYMENT_REQUIRED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "INVALID_SETUP_TOKEN": status.HTTP_400_BAD_REQUEST,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ANALYSIS_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PLAN_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "UNKNOWN_PAYER": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "ALREADY_ACTIVE": status.HTTP_409_CONFLICT,
    "ANALYSIS_NOT_COMPLETED": status.HTTP_409_CONFLICT,
    "STORAGE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_status(error_code: str | None) -> int:
    """Return the HTTP status for an error code (400 when unmapped)."""
    return ERROR_STATUS_CODES.get(error_code or "", status.HTTP_400_BAD_REQUEST)


def error_response(result: ServiceResult) -> Response:
    """
    Build a DRF Response for a failed ServiceResult.

    The body carries error, error_code and, when present, the failure
    details and field errors.
    """
    body = {"error": result.error, "error_code": result.error_code}
    if result.details:
        body["details"] = result.details
    if result.errors:
        body["errors"] = result.errors
    return Response(body, status=error_status(result.error_code))
