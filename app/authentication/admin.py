"""
Django admin configuration for accounts.

The credit balance is read-only here: corrections go through the
grant_credits management command so they leave a ledger row.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for User (email login, CPF, credits)."""

    list_display = (
        "email",
        "name",
        "national_id",
        "credits",
        "plan_tier",
        "credential_state",
        "is_active",
        "date_joined",
    )
    list_filter = (
        "credential_state",
        "plan_tier",
        "is_active",
        "is_staff",
        "has_placeholder_email",
    )
    search_fields = ("email", "name", "national_id")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Identity", {"fields": ("name", "national_id", "phone")}),
        (
            "Credits",
            {"fields": ("credits", "plan_tier")},
        ),
        (
            "Status",
            {
                "fields": (
                    "credential_state",
                    "has_placeholder_email",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                )
            },
        ),
        ("Permissions", {"fields": ("groups", "user_permissions")}),
        ("Important dates", {"fields": ("date_joined", "last_login")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("credits", "credential_state", "date_joined", "last_login")
