"""
Reusable model mixins.

Mixins:
    UUIDPrimaryKeyMixin: Non-guessable UUID primary keys
    MetadataMixin: Free-form JSON metadata with small helpers

Usage:
    from core.model_mixins import MetadataMixin, UUIDPrimaryKeyMixin
    from core.models import BaseModel

    class CreditTransaction(UUIDPrimaryKeyMixin, MetadataMixin, BaseModel):
        amount = models.IntegerField()

Note:
    Always list mixins before BaseModel in the bases.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from typing import Any


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use a UUID primary key instead of an auto-increment integer.

    Analysis and ledger ids travel through webhooks and share links, so they
    must not reveal record counts or be guessable.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class MetadataMixin(models.Model):
    """
    Flexible JSON metadata storage.

    Used for provider payload fragments (original payment status, amounts
    in currency) that are kept for auditing but never drive logic.
    """

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Flexible key-value metadata storage",
    )

    class Meta:
        abstract = True

    def merge_meta(self, values: dict[str, Any]) -> None:
        """
        Merge values into metadata without saving.

        Callers save with update_fields alongside their own changes.
        """
        merged = dict(self.metadata or {})
        merged.update(values)
        self.metadata = merged
