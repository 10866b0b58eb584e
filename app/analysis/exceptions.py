"""
Analysis-specific exceptions.

Exception Hierarchy:
    AnalysisNotFoundError (NotFoundError) - Unknown analysis id or token
    AnalysisNotCompletedError (ConflictError) - Sharing an unfinished analysis
"""

from core.exceptions import ConflictError, NotFoundError


class AnalysisNotFoundError(NotFoundError):
    default_error_code: str = "ANALYSIS_NOT_FOUND"


class AnalysisNotCompletedError(ConflictError):
    """Only completed analyses can be made public."""

    default_error_code: str = "ANALYSIS_NOT_COMPLETED"
