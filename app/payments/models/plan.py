"""
Plan model for the credit packs offered at checkout.

Usage:
    from payments.models import Plan

    plans = Plan.objects.active()
    plan = Plan.objects.active().get(type=PlanType.COMPLETE)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import BaseModel


class PlanType(models.TextChoices):
    """Catalogue entry kinds."""

    BASIC = "basic", "Basic"
    COMPLETE = "complete", "Complete"
    CREDITS_PACK = "credits_pack", "Credits pack"


class PlanQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Plan(BaseModel):
    """
    A purchasable credit pack.

    Fields:
        name: Display name
        type: basic / complete / credits_pack (unique)
        price: Price in BRL
        credits: Credits granted when the purchase is approved
        description: Marketing copy
        features: List of feature strings shown on the pricing page
        is_active: Whether the plan is offered
        sort_order: Position on the pricing page
        discount: Percentage discount advertised (0-100)
    """

    name = models.CharField(max_length=100)
    type = models.CharField(
        max_length=20,
        choices=PlanType.choices,
        unique=True,
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    credits = models.PositiveIntegerField()
    description = models.TextField(blank=True)
    features = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.PositiveSmallIntegerField(default=0)
    discount = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
    )

    objects = PlanQuerySet.as_manager()

    class Meta:
        ordering = ["sort_order", "price"]

    def __str__(self) -> str:
        return f"{self.name} ({self.credits} credits)"
