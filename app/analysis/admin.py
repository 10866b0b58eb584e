"""
Django admin configuration for analyses.

Status and credits are read-only: they only change through the
reservation and settlement services.
"""

from django.contrib import admin

from analysis.models import Analysis


@admin.register(Analysis)
class AnalysisAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "owner",
        "tier",
        "status",
        "credits_reserved",
        "is_public",
        "created_at",
    ]
    list_filter = ["status", "tier", "is_public", "created_at"]
    search_fields = ["id", "owner__email", "owner__national_id"]
    readonly_fields = [
        "id",
        "owner",
        "tier",
        "status",
        "credits_reserved",
        "share_token",
        "started_at",
        "completed_at",
        "failed_at",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    list_select_related = ["owner"]

    fieldsets = (
        (None, {"fields": ("id", "owner", "tier", "status", "credits_reserved")}),
        ("Image", {"fields": ("image_url", "image_id")}),
        ("Result", {"fields": ("result", "processing_time", "error_message")}),
        ("Sharing", {"fields": ("is_public", "share_token")}),
        (
            "Timestamps",
            {"fields": ("started_at", "completed_at", "failed_at", "created_at", "updated_at")},
        ),
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
