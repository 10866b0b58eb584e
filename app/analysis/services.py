"""
Analysis services.

This module provides:
- ReservationService: Submits an analysis and reserves its credits
- SettlementService: Applies pipeline outcomes (result or refund)
- AnalysisQueryService: Owner lists, dashboard statistics, sharing

Related files:
    - models.py: Analysis and its state machine
    - payments/ledger/services.py: LedgerService (usage and refund rows)
    - webhooks.py: HTTP entry point for the pipeline

Credit flow:
    reserve():  balance -= tier price, usage row (negative)
    settle(failed): balance += credits_reserved, refund row (positive)
    settle(completed): no balance effect

Usage:
    result = ReservationService.reserve(user, "complete")
    if not result and result.error_code == "INSUFFICIENT_CREDITS":
        ...

    SettlementService.settle(analysis_id, "failed", error_message="timeout")
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from django.db.models import Count, Q

from analysis.exceptions import AnalysisNotCompletedError, AnalysisNotFoundError
from analysis.models import TIER_CREDITS, Analysis, AnalysisStatus, AnalysisTier
from analysis.types import Settlement, SettlementOutcome
from core.exceptions import BaseApplicationError, ValidationError
from core.services import BaseService, ServiceResult
from payments.ledger.services import LedgerService

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User

logger = logging.getLogger(__name__)


def _parse_analysis_id(analysis_id) -> uuid.UUID:
    try:
        return uuid.UUID(str(analysis_id))
    except (TypeError, ValueError) as exc:
        raise AnalysisNotFoundError(
            f"Analysis {analysis_id} not found",
            details={"analysis_id": str(analysis_id)},
        ) from exc


def _not_found(analysis_id) -> AnalysisNotFoundError:
    return AnalysisNotFoundError(
        f"Analysis {analysis_id} not found",
        details={"analysis_id": str(analysis_id)},
    )


class ReservationService(BaseService):
    """
    Turns a submission into a pending analysis paid for with credits.

    The analysis, the debit and the usage row are written in one database
    transaction. The debit is conditional on the balance, so two racing
    submissions can never overdraw an account.
    """

    @classmethod
    def required_credits(cls, tier: str) -> int:
        """
        Credit price of a tier.

        Raises:
            ValidationError: If the tier is unknown
        """
        if tier not in TIER_CREDITS:
            raise ValidationError(
                f"Unknown analysis tier '{tier}'",
                details={"tier": tier, "allowed": list(AnalysisTier.values)},
            )
        return TIER_CREDITS[tier]

    @classmethod
    def reserve(
        cls,
        user: User,
        tier: str,
        image_url: str = "",
        image_id: str = "",
    ) -> ServiceResult[Analysis]:
        """
        Create a pending analysis and debit its price.

        Args:
            user: Submitting account
            tier: basic / complete
            image_url: Photo URL, if already uploaded
            image_id: Photo id in the image store

        Returns:
            ServiceResult with the new Analysis. Failures: VALIDATION_ERROR,
            INSUFFICIENT_CREDITS (details carry required and available; nothing
            is written), STORAGE_UNAVAILABLE
        """
        try:
            amount = cls.required_credits(tier)
            with cls.atomic():
                analysis = Analysis.objects.create(
                    owner=user,
                    tier=tier,
                    credits_reserved=amount,
                    image_url=image_url or "",
                    image_id=image_id or "",
                )
                LedgerService.record_usage(user, analysis, amount)
        except BaseApplicationError as exc:
            logger.info(
                "Analysis submission refused",
                extra={"user_id": user.pk, "tier": tier, "error_code": exc.error_code},
            )
            return ServiceResult.from_error(exc)

        logger.info(
            "Analysis submitted",
            extra={
                "analysis_id": str(analysis.pk),
                "user_id": user.pk,
                "credits_reserved": amount,
            },
        )
        return ServiceResult.success(analysis)


class SettlementService(BaseService):
    """
    Applies pipeline outcomes exactly once per analysis.

    The analysis row is locked while it is settled. An analysis that is
    already terminal is left alone, so redelivered webhooks never refund
    twice. The refund itself is also guarded by a unique constraint.
    """

    @classmethod
    def settle(
        cls,
        analysis_id,
        outcome: str,
        result: dict | None = None,
        error_message: str = "",
        processing_time: float | None = None,
        image_url: str = "",
        image_id: str = "",
    ) -> ServiceResult[Settlement]:
        """
        Apply a terminal outcome.

        Args:
            analysis_id: Analysis UUID
            outcome: completed / failed
            result: Report payload (completed)
            error_message: Failure reason (failed)
            processing_time: Seconds spent in the pipeline
            image_url / image_id: Photo location reported by the pipeline

        Returns:
            ServiceResult with a Settlement. Failures: VALIDATION_ERROR,
            ANALYSIS_NOT_FOUND, STORAGE_UNAVAILABLE
        """
        if outcome not in SettlementOutcome.ALL:
            return ServiceResult.from_error(
                ValidationError(
                    f"Unknown outcome '{outcome}'",
                    details={"outcome": outcome, "allowed": list(SettlementOutcome.ALL)},
                )
            )

        try:
            pk = _parse_analysis_id(analysis_id)
            with cls.atomic():
                settlement = cls._settle_locked(
                    pk,
                    outcome,
                    result=result,
                    error_message=error_message,
                    processing_time=processing_time,
                    image_url=image_url,
                    image_id=image_id,
                )
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        return ServiceResult.success(settlement)

    @classmethod
    def _settle_locked(
        cls,
        pk: uuid.UUID,
        outcome: str,
        result: dict | None,
        error_message: str,
        processing_time: float | None,
        image_url: str,
        image_id: str,
    ) -> Settlement:
        analysis = Analysis.objects.select_for_update().filter(pk=pk).first()
        if analysis is None:
            raise _not_found(pk)

        if analysis.is_terminal:
            logger.info(
                "Analysis already settled, ignoring outcome",
                extra={
                    "analysis_id": str(pk),
                    "status": analysis.status,
                    "outcome": outcome,
                },
            )
            return Settlement(analysis=analysis, applied=False)

        if image_url:
            analysis.image_url = image_url
        if image_id:
            analysis.image_id = image_id

        refund = None
        if outcome == SettlementOutcome.COMPLETED:
            analysis.complete(result=result, processing_time=processing_time)
            analysis.save()
        else:
            analysis.fail(error_message=error_message, processing_time=processing_time)
            analysis.save()
            refund = LedgerService.refund_analysis(analysis)

        logger.info(
            f"Analysis {outcome}",
            extra={
                "analysis_id": str(pk),
                "user_id": analysis.owner_id,
                "refunded": refund.amount if refund else 0,
            },
        )
        return Settlement(analysis=analysis, refund=refund)

    @classmethod
    def mark_processing(cls, analysis_id) -> ServiceResult[Settlement]:
        """
        Record that the pipeline started work.

        Only a pending analysis moves; any other status is a logged no-op.
        """
        try:
            pk = _parse_analysis_id(analysis_id)
            with cls.atomic():
                analysis = Analysis.objects.select_for_update().filter(pk=pk).first()
                if analysis is None:
                    raise _not_found(pk)
                if analysis.status != AnalysisStatus.PENDING:
                    logger.info(
                        "Ignoring processing notice",
                        extra={"analysis_id": str(pk), "status": analysis.status},
                    )
                    return ServiceResult.success(
                        Settlement(analysis=analysis, applied=False)
                    )
                analysis.start_processing()
                analysis.save()
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        logger.info("Analysis processing", extra={"analysis_id": str(pk)})
        return ServiceResult.success(Settlement(analysis=analysis))


class AnalysisQueryService(BaseService):
    """Read paths and sharing for analyses."""

    RECENT_LIMIT = 5

    @staticmethod
    def list_for_owner(user: User, status: str | None = None):
        queryset = Analysis.objects.for_owner(user)
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @staticmethod
    def get_for_owner(user: User, analysis_id) -> Analysis:
        """
        Raises:
            AnalysisNotFoundError: If the analysis does not exist or is not
                owned by user
        """
        pk = _parse_analysis_id(analysis_id)
        analysis = Analysis.objects.for_owner(user).filter(pk=pk).first()
        if analysis is None:
            raise _not_found(analysis_id)
        return analysis

    @staticmethod
    def get(analysis_id) -> Analysis:
        pk = _parse_analysis_id(analysis_id)
        analysis = Analysis.objects.select_related("owner").filter(pk=pk).first()
        if analysis is None:
            raise _not_found(analysis_id)
        return analysis

    @staticmethod
    def get_shared(share_token: str) -> Analysis:
        analysis = (
            Analysis.objects.shared()
            .select_related("owner")
            .filter(share_token=share_token)
            .first()
        )
        if analysis is None:
            raise AnalysisNotFoundError(
                "Analysis not found or not shared",
                details={"share_token": share_token},
            )
        return analysis

    @classmethod
    def dashboard(cls, user: User) -> dict[str, Any]:
        """
        Statistics and recent analyses for the dashboard.

        Returns:
            {"stats": {...}, "recent_analyses": [...]}; success_rate is the
            rounded percentage of completed analyses
        """
        counts = Analysis.objects.for_owner(user).aggregate(
            total=Count("pk"),
            completed=Count("pk", filter=Q(status=AnalysisStatus.COMPLETED)),
            failed=Count("pk", filter=Q(status=AnalysisStatus.FAILED)),
            in_progress=Count(
                "pk",
                filter=Q(
                    status__in=[AnalysisStatus.PENDING, AnalysisStatus.PROCESSING]
                ),
            ),
        )
        total = counts["total"]
        success_rate = round(counts["completed"] / total * 100) if total else 0

        recent = list(
            Analysis.objects.for_owner(user).values(
                "id", "status", "tier", "credits_reserved", "created_at"
            )[: cls.RECENT_LIMIT]
        )
        return {
            "stats": {
                "total_analyses": total,
                "completed_analyses": counts["completed"],
                "failed_analyses": counts["failed"],
                "pending_analyses": counts["in_progress"],
                "success_rate": success_rate,
            },
            "recent_analyses": recent,
        }

    @classmethod
    def set_public(
        cls, user: User, analysis_id, is_public: bool
    ) -> ServiceResult[Analysis]:
        """
        Share or unshare a completed analysis.

        Returns:
            ServiceResult with the Analysis. Failures: ANALYSIS_NOT_FOUND,
            ANALYSIS_NOT_COMPLETED
        """
        try:
            analysis = cls.get_for_owner(user, analysis_id)
            if analysis.status != AnalysisStatus.COMPLETED:
                raise AnalysisNotCompletedError(
                    "Only completed analyses can be shared",
                    details={"status": analysis.status},
                )
            analysis.set_public(is_public)
            with cls.atomic():
                analysis.save(update_fields=["is_public", "share_token", "updated_at"])
        except BaseApplicationError as exc:
            return ServiceResult.from_error(exc)

        logger.info(
            "Analysis visibility changed",
            extra={"analysis_id": str(analysis.pk), "is_public": is_public},
        )
        return ServiceResult.success(analysis)
