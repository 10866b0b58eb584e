"""
Core abstract base model.

Base Classes:
    BaseModel: Abstract model with created_at / updated_at timestamps

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin

    class Analysis(UUIDPrimaryKeyMixin, BaseModel):
        tier = models.CharField(max_length=20)
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Abstract base model providing creation and modification timestamps.

    Fields:
        created_at: Set once when the row is inserted (indexed)
        updated_at: Refreshed on every save()

    Note:
        QuerySet.update() bypasses auto_now, so services that use F()
        updates must include updated_at themselves when it matters.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when this record was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when this record was last modified",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        """Default string representation using primary key."""
        return f"{self.__class__.__name__}(id={self.pk})"
