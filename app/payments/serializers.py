"""
Serializers for credit and payment endpoints.

- CreditTransactionSerializer: Ledger rows in the history
- PlanSerializer: Catalogue entries
- CheckoutSerializer / HistoryQuerySerializer: Request payloads
- PaymentWebhookSerializer: Payment processor notification
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from rest_framework import serializers

from analysis.models import Analysis
from authentication.types import PHONE_MAX_LENGTH
from core.helpers import digits_only
from payments.ledger.models import (
    CreditTransaction,
    TransactionKind,
    TransactionStatus,
)
from payments.models import Plan

EMAIL_MAX_LENGTH = 254


class RelatedAnalysisSerializer(serializers.ModelSerializer):
    class Meta:
        model = Analysis
        fields = ["id", "status", "tier", "created_at"]
        read_only_fields = fields


class CreditTransactionSerializer(serializers.ModelSerializer):
    analysis = RelatedAnalysisSerializer(source="related_analysis", read_only=True)

    class Meta:
        model = CreditTransaction
        fields = [
            "id",
            "kind",
            "amount",
            "status",
            "description",
            "plan",
            "analysis",
            "created_at",
        ]
        read_only_fields = fields


class PlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = Plan
        fields = [
            "id",
            "name",
            "type",
            "price",
            "credits",
            "description",
            "features",
            "discount",
        ]
        read_only_fields = fields


class CheckoutSerializer(serializers.Serializer):
    plan_id = serializers.IntegerField(min_value=1)


class HistoryQuerySerializer(serializers.Serializer):
    """Filters for the credit history."""

    kind = serializers.ChoiceField(choices=TransactionKind.choices, required=False)
    status = serializers.ChoiceField(choices=TransactionStatus.choices, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError(
                {"end_date": "end_date must not be before start_date."}
            )
        return attrs


class PaymentWebhookSerializer(serializers.Serializer):
    """
    Notification sent by the payment processor.

    The processor sends camelCase keys and the shared secret in a
    WEBHOOK_SECRET field; snake_case keys are accepted too.
    """

    transaction_id = serializers.CharField(max_length=255)
    status = serializers.CharField(max_length=50)
    cpf = serializers.CharField(max_length=20)
    credits = serializers.IntegerField(required=False, default=0, min_value=0)
    amount = serializers.CharField(required=False, allow_blank=True, default="")
    name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    plan = serializers.CharField(required=False, allow_blank=True, default="")

    KEY_ALIASES = {
        "transactionId": "transaction_id",
        "national_id": "cpf",
    }

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = {self.KEY_ALIASES.get(key, key): value for key, value in data.items()}
        return super().to_internal_value(data)

    def validate_cpf(self, value):
        value = digits_only(value)
        if len(value) != 11:
            raise serializers.ValidationError("CPF must have 11 digits.")
        return value

    def validate_email(self, value):
        # An unusable address is replaced by a placeholder, not rejected
        value = (value or "").strip().lower()
        if not value or len(value) > EMAIL_MAX_LENGTH:
            return ""
        try:
            validate_email(value)
        except DjangoValidationError:
            return ""
        return value

    def validate_phone(self, value):
        value = digits_only(value)
        if len(value) > PHONE_MAX_LENGTH:
            raise serializers.ValidationError(
                f"Phone must have at most {PHONE_MAX_LENGTH} digits."
            )
        return value
