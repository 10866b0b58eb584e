"""
Analysis models.

This module defines:
- AnalysisTier: basic / complete, with their credit price
- AnalysisStatus: pending / processing / completed / failed
- Analysis: One photo submitted for personality analysis

Related files:
    - services.py: Reservation, settlement and queries
    - payments/ledger: usage and refund rows referencing an Analysis

State machine:
    PENDING -> PROCESSING -> COMPLETED
                          -> FAILED
    PENDING -> COMPLETED / FAILED (pipeline may skip "processing")

    COMPLETED and FAILED are terminal. The status field is protected, so it
    only changes through the transitions below.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from core.helpers import generate_token
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class AnalysisTier(models.TextChoices):
    BASIC = "basic", "Basic"
    COMPLETE = "complete", "Complete"


# Credits reserved per tier
TIER_CREDITS = {
    AnalysisTier.BASIC: 1,
    AnalysisTier.COMPLETE: 3,
}


class AnalysisStatus(models.TextChoices):
    """
    Pipeline status of an analysis.

    States:
        PENDING: Credits reserved, waiting for the pipeline
        PROCESSING: Pipeline picked it up
        COMPLETED: Result stored (terminal)
        FAILED: Pipeline gave up, credits refunded (terminal)
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"

    @classmethod
    def terminal(cls) -> tuple[str, ...]:
        return (cls.COMPLETED, cls.FAILED)


class AnalysisQuerySet(models.QuerySet):
    def for_owner(self, user):
        return self.filter(owner=user)

    def in_progress(self):
        return self.filter(
            status__in=[AnalysisStatus.PENDING, AnalysisStatus.PROCESSING]
        )

    def shared(self):
        """Completed analyses their owner made public."""
        return self.filter(
            is_public=True,
            status=AnalysisStatus.COMPLETED,
            share_token__isnull=False,
        )


class Analysis(UUIDPrimaryKeyMixin, BaseModel):
    """
    A personality analysis job.

    Fields:
        owner: Account that paid for it (never changes)
        tier: basic / complete
        status: FSM status, forward only
        credits_reserved: Credits debited at submission (never changes)
        image_url / image_id: Photo location reported by the client or pipeline
        result: Structured report from the pipeline
        processing_time: Pipeline processing time in seconds
        error_message: Failure reason reported by the pipeline
        is_public / share_token: Public sharing of a completed analysis
        started_at / completed_at / failed_at: Transition timestamps
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="analyses",
    )
    tier = models.CharField(max_length=20, choices=AnalysisTier.choices)
    status = FSMField(
        default=AnalysisStatus.PENDING,
        choices=AnalysisStatus.choices,
        protected=True,
        db_index=True,
    )
    credits_reserved = models.PositiveIntegerField(
        help_text="Credits debited when the analysis was submitted",
    )

    image_url = models.URLField(max_length=500, blank=True)
    image_id = models.CharField(max_length=255, blank=True)

    result = models.JSONField(null=True, blank=True)
    processing_time = models.FloatField(
        null=True,
        blank=True,
        help_text="Pipeline processing time in seconds",
    )
    error_message = models.TextField(blank=True)

    is_public = models.BooleanField(default=False)
    share_token = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
    )

    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    failed_at = models.DateTimeField(null=True, blank=True)

    objects = AnalysisQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "analyses"
        indexes = [
            models.Index(
                fields=["owner", "-created_at"],
                name="analysis_owner_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Analysis {self.pk} ({self.tier}, {self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in AnalysisStatus.terminal()

    @property
    def teaser(self) -> dict:
        """Headline fields of the result, shown to non-owners."""
        result = self.result or {}
        compatibility = result.get("compatibility") or {}
        celebrities = result.get("celebrities") or {}
        return {
            "mbti": result.get("mbti"),
            "passion_score": compatibility.get("passionScore"),
            "ideal_color": compatibility.get("idealColor"),
            "brazilian_celebrity": (celebrities.get("brazilian") or {}).get("name"),
            "international_celebrity": (celebrities.get("international") or {}).get(
                "name"
            ),
        }

    def set_public(self, is_public: bool) -> None:
        """Toggle sharing, generating a share token the first time."""
        self.is_public = is_public
        if is_public and not self.share_token:
            self.share_token = generate_token(16)

    # =========================================================================
    # State Transitions
    # =========================================================================

    @transition(
        field=status,
        source=AnalysisStatus.PENDING,
        target=AnalysisStatus.PROCESSING,
    )
    def start_processing(self):
        self.started_at = timezone.now()

    @transition(
        field=status,
        source=[AnalysisStatus.PENDING, AnalysisStatus.PROCESSING],
        target=AnalysisStatus.COMPLETED,
    )
    def complete(self, result: dict | None = None, processing_time: float | None = None):
        """Store the pipeline result."""
        self.result = result or {}
        if processing_time is not None:
            self.processing_time = processing_time
        self.completed_at = timezone.now()

    @transition(
        field=status,
        source=[AnalysisStatus.PENDING, AnalysisStatus.PROCESSING],
        target=AnalysisStatus.FAILED,
    )
    def fail(self, error_message: str = "", processing_time: float | None = None):
        """Record a pipeline failure. The refund is the caller's job."""
        self.error_message = error_message or ""
        if processing_time is not None:
            self.processing_time = processing_time
        self.failed_at = timezone.now()
