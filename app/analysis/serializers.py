"""
Serializers for analysis endpoints.

- AnalysisSubmitSerializer: Submission payload
- AnalysisSummarySerializer: List and status rows (no result)
- AnalysisDetailSerializer: Full analysis for its owner
- AnalysisTeaserSerializer: Headline fields for anyone else
- SharedAnalysisSerializer: Public view through a share token
- PipelineWebhookSerializer: Payload sent by the analysis pipeline
"""

from rest_framework import serializers

from analysis.models import Analysis, AnalysisStatus, AnalysisTier


class AnalysisSubmitSerializer(serializers.Serializer):
    tier = serializers.ChoiceField(choices=AnalysisTier.choices)
    image_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    image_id = serializers.CharField(required=False, allow_blank=True, max_length=255)


class AnalysisSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Analysis
        fields = [
            "id",
            "tier",
            "status",
            "credits_reserved",
            "processing_time",
            "error_message",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AnalysisDetailSerializer(serializers.ModelSerializer):
    """Everything the owner may see."""

    is_owner = serializers.SerializerMethodField()

    class Meta:
        model = Analysis
        fields = [
            "id",
            "tier",
            "status",
            "credits_reserved",
            "image_url",
            "result",
            "processing_time",
            "error_message",
            "is_public",
            "share_token",
            "is_owner",
            "created_at",
            "updated_at",
            "completed_at",
        ]
        read_only_fields = fields

    def get_is_owner(self, obj) -> bool:
        return True


class AnalysisTeaserSerializer(serializers.ModelSerializer):
    """Teaser of a public analysis for visitors who do not own it."""

    teaser = serializers.DictField(read_only=True)
    is_owner = serializers.SerializerMethodField()
    requires_credits = serializers.SerializerMethodField()

    class Meta:
        model = Analysis
        fields = [
            "id",
            "tier",
            "status",
            "created_at",
            "teaser",
            "is_owner",
            "requires_credits",
        ]
        read_only_fields = fields

    def get_is_owner(self, obj) -> bool:
        return False

    def get_requires_credits(self, obj) -> bool:
        return True


class SharedAnalysisSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source="owner.name", read_only=True)

    class Meta:
        model = Analysis
        fields = [
            "id",
            "tier",
            "status",
            "created_at",
            "owner_name",
            "result",
            "is_public",
        ]
        read_only_fields = fields


class VisibilitySerializer(serializers.Serializer):
    is_public = serializers.BooleanField()


class PipelineWebhookSerializer(serializers.Serializer):
    """
    Status report from the analysis pipeline.

    The pipeline sends camelCase keys; snake_case is accepted too.
    """

    analysis_id = serializers.UUIDField()
    status = serializers.ChoiceField(
        choices=[
            AnalysisStatus.PROCESSING,
            AnalysisStatus.COMPLETED,
            AnalysisStatus.FAILED,
        ]
    )
    result = serializers.DictField(required=False, allow_null=True)
    processing_time = serializers.FloatField(
        required=False, allow_null=True, min_value=0
    )
    error_message = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    image_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    image_id = serializers.CharField(required=False, allow_blank=True, max_length=255)

    CAMEL_CASE_KEYS = {
        "analysisId": "analysis_id",
        "processingTime": "processing_time",
        "errorMessage": "error_message",
        "imageUrl": "image_url",
        "imageId": "image_id",
    }

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = {self.CAMEL_CASE_KEYS.get(key, key): value for key, value in data.items()}
        return super().to_internal_value(data)
