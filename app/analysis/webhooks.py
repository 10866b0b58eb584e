"""
Webhook endpoint for the analysis pipeline.

The pipeline reports progress and terminal outcomes of each analysis:
    {"analysisId": "...", "status": "processing" | "completed" | "failed",
     "result": {...}, "processingTime": 12.5, "errorMessage": "..."}

Deliveries are at least once. Settlement is idempotent, so a redelivered
outcome returns 200 without touching the ledger again.

Usage:
    # In urls.py
    from analysis.webhooks import analysis_webhook

    urlpatterns = [
        path("webhooks/analysis/", analysis_webhook, name="analysis_webhook"),
    ]
"""

from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from analysis.models import AnalysisStatus
from analysis.serializers import PipelineWebhookSerializer
from analysis.services import SettlementService
from core.helpers import get_client_ip, secrets_match
from core.responses import error_status

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Webhook-Secret"


@csrf_exempt
@require_POST
def analysis_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive a pipeline status report.

    Security:
    - When ANALYSIS_WEBHOOK_SECRET is set, the X-Webhook-Secret header (or
      a "secret" body field) must match it
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Returns:
        JsonResponse with status:
        - 200: Report applied or ignored as a duplicate
        - 400: Malformed payload
        - 403: Wrong secret
        - 404: Unknown analysis
        - 503: Database unavailable
    """
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.warning("Analysis webhook with invalid JSON body")
        return JsonResponse(
            {"error": "Invalid JSON", "error_code": "VALIDATION_ERROR"}, status=400
        )
    if not isinstance(payload, dict):
        return JsonResponse(
            {"error": "Invalid payload", "error_code": "VALIDATION_ERROR"}, status=400
        )

    expected = settings.ANALYSIS_WEBHOOK_SECRET
    if expected:
        provided = request.headers.get(SECRET_HEADER) or payload.get("secret", "")
        if not secrets_match(provided, expected):
            logger.warning(
                "Analysis webhook rejected: invalid secret",
                extra={"client_ip": get_client_ip(request)},
            )
            return JsonResponse(
                {"error": "Invalid webhook secret", "error_code": "FORBIDDEN"},
                status=403,
            )

    serializer = PipelineWebhookSerializer(data=payload)
    if not serializer.is_valid():
        logger.warning(
            "Analysis webhook with invalid payload",
            extra={"errors": serializer.errors},
        )
        return JsonResponse(
            {
                "error": "Invalid payload",
                "error_code": "VALIDATION_ERROR",
                "errors": serializer.errors,
            },
            status=400,
        )
    data = serializer.validated_data

    logger.info(
        f"Received analysis webhook: {data['status']}",
        extra={"analysis_id": str(data["analysis_id"])},
    )

    if data["status"] == AnalysisStatus.PROCESSING:
        result = SettlementService.mark_processing(data["analysis_id"])
    else:
        result = SettlementService.settle(
            data["analysis_id"],
            data["status"],
            result=data.get("result"),
            error_message=data.get("error_message") or "",
            processing_time=data.get("processing_time"),
            image_url=data.get("image_url", ""),
            image_id=data.get("image_id", ""),
        )

    if not result:
        body = {"error": result.error, "error_code": result.error_code}
        if result.details:
            body["details"] = result.details
        return JsonResponse(body, status=error_status(result.error_code))

    settlement = result.data
    return JsonResponse(
        {
            "analysis_id": str(settlement.analysis.pk),
            "status": settlement.analysis.status,
            "applied": settlement.applied,
        }
    )
