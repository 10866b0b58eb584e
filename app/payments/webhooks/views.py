"""
Webhook endpoint view for the payment processor.

The view:
1. Parses the JSON body
2. Verifies the shared secret before anything is read or written
3. Applies the notification through PaymentReconciler
4. Returns the settled transaction and, for accounts created from the
   payment, the password setup link

Usage:
    # In urls.py
    from payments.webhooks.views import payment_webhook

    urlpatterns = [
        path("webhooks/payments/", payment_webhook, name="payment_webhook"),
    ]
"""

from __future__ import annotations

import json
import logging

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from authentication.types import PayerProfile
from core.helpers import get_client_ip, secrets_match
from core.responses import error_status
from payments.serializers import PaymentWebhookSerializer
from payments.services import PaymentReconciler
from payments.types import PaymentNotification

logger = logging.getLogger(__name__)

SECRET_FIELDS = ("WEBHOOK_SECRET", "secret")
SECRET_HEADER = "X-Webhook-Secret"


def _provided_secret(request: HttpRequest, payload: dict) -> str:
    for field in SECRET_FIELDS:
        if payload.get(field):
            return str(payload[field])
    return request.headers.get(SECRET_HEADER, "")


@csrf_exempt
@require_POST
def payment_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive a payment processor notification.

    Security:
    - Shared secret compared in constant time; mismatch is rejected whole
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - The processor transaction id is unique in the ledger
    - Duplicate deliveries return 200 without crediting again

    Returns:
        JsonResponse with status:
        - 200: Notification applied or ignored as a duplicate
        - 400: Malformed payload
        - 403: Wrong secret
        - 404: Unknown payer for a non-approved payment
        - 503: Database unavailable
    """
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.warning("Payment webhook with invalid JSON body")
        return JsonResponse(
            {"error": "Invalid JSON", "error_code": "VALIDATION_ERROR"}, status=400
        )
    if not isinstance(payload, dict):
        return JsonResponse(
            {"error": "Invalid payload", "error_code": "VALIDATION_ERROR"}, status=400
        )

    secret = _provided_secret(request, payload)
    if not secrets_match(secret, settings.PAYMENT_WEBHOOK_SECRET):
        logger.warning(
            "Payment webhook rejected: invalid secret",
            extra={"client_ip": get_client_ip(request)},
        )
        return JsonResponse(
            {"error": "Invalid webhook secret", "error_code": "FORBIDDEN"},
            status=403,
        )

    serializer = PaymentWebhookSerializer(data=payload)
    if not serializer.is_valid():
        logger.warning(
            "Payment webhook with invalid payload",
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
        f"Received payment webhook: {data['status']}",
        extra={"external_payment_ref": data["transaction_id"]},
    )

    notification = PaymentNotification(
        external_payment_ref=data["transaction_id"],
        payer_national_id=data["cpf"],
        outcome=data["status"],
        credits=data["credits"],
        shared_secret=secret,
        payer=PayerProfile(
            national_id=data["cpf"],
            name=data["name"],
            email=data["email"],
            phone=data["phone"],
            plan_tier=data["plan"],
        ),
        price=data["amount"],
        plan=data["plan"],
    )
    result = PaymentReconciler.apply_payment(notification)

    if not result:
        body = {"error": result.error, "error_code": result.error_code}
        if result.details:
            body["details"] = result.details
        if result.errors:
            body["errors"] = result.errors
        return JsonResponse(body, status=error_status(result.error_code))

    application = result.data
    return JsonResponse(
        {
            "transaction_id": data["transaction_id"],
            "user_id": application.user.pk,
            "status": application.transaction.status,
            "applied": application.applied,
            "setup_password_url": application.setup_url,
        }
    )
