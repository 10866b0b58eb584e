"""
Django admin configuration for the credit ledger.

Ledger rows are append-only: the admin shows them but never edits or
deletes them. Staff grant credits with the grant_credits management
command, which goes through LedgerService.
"""

from django.contrib import admin

from .models import CreditTransaction


@admin.register(CreditTransaction)
class CreditTransactionAdmin(admin.ModelAdmin):
    """Read-only view of the credit ledger."""

    list_display = [
        "id",
        "created_at",
        "user",
        "kind",
        "amount_display",
        "status",
        "external_payment_ref",
        "related_analysis",
    ]
    list_filter = ["kind", "status", "created_at"]
    search_fields = [
        "id",
        "external_payment_ref",
        "user__email",
        "user__national_id",
        "description",
    ]
    readonly_fields = [
        "id",
        "user",
        "kind",
        "amount",
        "status",
        "external_payment_ref",
        "related_analysis",
        "description",
        "plan",
        "metadata",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    list_select_related = ["user"]

    fieldsets = (
        (
            "Movement",
            {
                "fields": ("id", "user", "kind", "amount", "status"),
            },
        ),
        (
            "Reference",
            {
                "fields": ("external_payment_ref", "related_analysis", "plan"),
            },
        ),
        (
            "Additional Info",
            {
                "fields": ("description", "metadata", "created_at", "updated_at"),
            },
        ),
    )

    @admin.display(description="Amount")
    def amount_display(self, obj: CreditTransaction) -> str:
        return f"{obj.amount:+d}"

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_change_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False
