import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("analysis", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Plan",
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
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("basic", "Basic"),
                            ("complete", "Complete"),
                            ("credits_pack", "Credits pack"),
                        ],
                        max_length=20,
                        unique=True,
                    ),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.00"))
                        ],
                    ),
                ),
                ("credits", models.PositiveIntegerField()),
                ("description", models.TextField(blank=True)),
                ("features", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("sort_order", models.PositiveSmallIntegerField(default=0)),
                (
                    "discount",
                    models.PositiveSmallIntegerField(
                        default=0,
                        validators=[django.core.validators.MaxValueValidator(100)],
                    ),
                ),
            ],
            options={
                "ordering": ["sort_order", "price"],
            },
        ),
        migrations.CreateModel(
            name="CreditTransaction",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Flexible key-value metadata storage",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("purchase", "Purchase"),
                            ("usage", "Usage"),
                            ("refund", "Refund"),
                            ("bonus", "Bonus"),
                        ],
                        help_text="Category of this movement",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.IntegerField(
                        help_text="Signed credit delta (usage rows are negative)",
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Only completed rows count towards the balance",
                        max_length=50,
                        protected=True,
                    ),
                ),
                (
                    "external_payment_ref",
                    models.CharField(
                        blank=True,
                        help_text="Payment processor transaction id (idempotency key)",
                        max_length=255,
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "description",
                    models.CharField(
                        blank=True,
                        help_text="Human-readable description",
                        max_length=255,
                    ),
                ),
                (
                    "plan",
                    models.CharField(
                        blank=True,
                        help_text="Plan type or analysis tier",
                        max_length=50,
                    ),
                ),
                (
                    "related_analysis",
                    models.ForeignKey(
                        blank=True,
                        help_text="Analysis this usage or refund belongs to",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_transactions",
                        to="analysis.analysis",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Account whose balance this row affects",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="credit_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["user", "-created_at"],
                        name="credit_tx_user_created_idx",
                    ),
                    models.Index(
                        fields=["kind", "status"],
                        name="credit_tx_kind_status_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("kind", "refund")),
                        fields=("related_analysis",),
                        name="unique_refund_per_analysis",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("kind", "usage")),
                        fields=("related_analysis",),
                        name="unique_usage_per_analysis",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("amount__lt", 0), ("kind", "usage")),
                            models.Q(
                                models.Q(("kind", "usage"), _negated=True),
                                ("amount__gte", 0),
                            ),
                            _connector="OR",
                        ),
                        name="credit_transaction_amount_sign",
                    ),
                ],
            },
        ),
    ]
