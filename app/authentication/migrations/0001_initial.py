import django_fsm
from django.db import migrations, models

import authentication.managers
import authentication.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                (
                    "last_login",
                    models.DateTimeField(blank=True, null=True, verbose_name="last login"),
                ),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                (
                    "email",
                    models.EmailField(
                        db_index=True,
                        help_text="User's email address (login identifier)",
                        max_length=254,
                        unique=True,
                    ),
                ),
                (
                    "name",
                    models.CharField(blank=True, help_text="Display name", max_length=100),
                ),
                (
                    "national_id",
                    models.CharField(
                        blank=True,
                        help_text="CPF, digits only. Identifies the payer in payment webhooks.",
                        max_length=11,
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "phone",
                    models.CharField(
                        blank=True,
                        help_text="Mobile phone number, digits only",
                        max_length=11,
                    ),
                ),
                (
                    "credits",
                    models.PositiveIntegerField(
                        default=0, help_text="Current credit balance"
                    ),
                ),
                (
                    "plan_tier",
                    models.CharField(
                        choices=[
                            ("free", "Free"),
                            ("basic", "Basic"),
                            ("complete", "Complete"),
                            ("premium", "Premium"),
                        ],
                        default="free",
                        help_text="Plan label (informational)",
                        max_length=20,
                    ),
                ),
                (
                    "credential_state",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("active", "Active"),
                            ("suspended", "Suspended"),
                        ],
                        db_index=True,
                        default="active",
                        help_text="Whether the account has a usable password",
                        max_length=50,
                    ),
                ),
                (
                    "has_placeholder_email",
                    models.BooleanField(
                        default=False,
                        help_text="Email was generated at provisioning and must be replaced",
                    ),
                ),
                (
                    "preferences",
                    models.JSONField(
                        blank=True,
                        default=authentication.models.default_preferences,
                        help_text="Notification preferences",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Whether this user account is active. Deselect instead of deleting.",
                    ),
                ),
                (
                    "is_staff",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the user can access the admin site.",
                    ),
                ),
                (
                    "date_joined",
                    models.DateTimeField(
                        auto_now_add=True, help_text="When the user account was created"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True, help_text="When the user record was last modified"
                    ),
                ),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "ordering": ["-date_joined"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("credits__gte", 0)),
                        name="user_credits_non_negative",
                    )
                ],
            },
            managers=[
                ("objects", authentication.managers.UserManager()),
            ],
        ),
    ]
