"""
Payment admin configuration.

This file imports the ledger admin from the ledger submodule and registers
the plan catalogue with the Django admin.
"""

from django.contrib import admin

from payments.ledger.admin import CreditTransactionAdmin
from payments.models import Plan

__all__ = ["CreditTransactionAdmin", "PlanAdmin"]


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "type",
        "price",
        "credits",
        "discount",
        "is_active",
        "sort_order",
    ]
    list_filter = ["is_active", "type"]
    list_editable = ["is_active", "sort_order"]
    ordering = ["sort_order"]
