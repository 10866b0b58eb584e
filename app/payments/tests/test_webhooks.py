"""
Tests for the payment processor webhook.

POST /api/v1/webhooks/payments/

The processor posts JSON with camelCase keys and the shared secret in a
WEBHOOK_SECRET field.
"""

import json

from authentication.models import CredentialState, User
from payments.ledger.models import CreditTransaction
from payments.tests.conftest import WEBHOOK_SECRET


WEBHOOK_URL = "/api/v1/webhooks/payments/"


def processor_payload(**overrides):
    payload = {
        "transactionId": "tx_100",
        "status": "aprovado",
        "cpf": "111.444.777-35",
        "credits": 1000,
        "amount": "29.90",
        "name": "Bruno Lima",
        "email": "bruno@example.com",
        "phone": "(11) 91234-5678",
        "plan": "basic",
        "WEBHOOK_SECRET": WEBHOOK_SECRET,
    }
    payload.update(overrides)
    return payload


def post_json(client, payload, **extra):
    return client.post(
        WEBHOOK_URL, data=json.dumps(payload), content_type="application/json", **extra
    )


class TestPaymentWebhookSecurity:
    """Secret handling and request shape."""

    def test_wrong_secret_is_403(self, client, db):
        response = post_json(client, processor_payload(WEBHOOK_SECRET="guess"))

        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"
        assert not CreditTransaction.objects.exists()
        assert not User.objects.exists()

    def test_secret_checked_before_payload_validation(self, client, db):
        response = post_json(client, {"WEBHOOK_SECRET": "guess"})

        assert response.status_code == 403

    def test_secret_in_header(self, client, payer):
        payload = processor_payload(cpf=payer.national_id)
        del payload["WEBHOOK_SECRET"]

        response = post_json(client, payload, HTTP_X_WEBHOOK_SECRET=WEBHOOK_SECRET)

        assert response.status_code == 200

    def test_invalid_json_is_400(self, client, db):
        response = client.post(WEBHOOK_URL, data="nope", content_type="application/json")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_short_cpf_is_400(self, client, db):
        response = post_json(client, processor_payload(cpf="1234"))

        assert response.status_code == 400
        assert "cpf" in response.json()["errors"]

    def test_over_long_phone_is_400(self, client, db):
        response = post_json(client, processor_payload(phone="+55 (11) 91234-5678"))

        assert response.status_code == 400
        assert "phone" in response.json()["errors"]
        assert not User.objects.exists()

    def test_get_not_allowed(self, client, db):
        assert client.get(WEBHOOK_URL).status_code == 405


class TestPaymentWebhook:
    """Applying notifications over HTTP."""

    def test_known_payer_is_credited(self, client, payer):
        response = post_json(client, processor_payload(cpf=payer.national_id))

        payer.refresh_from_db()
        assert response.status_code == 200
        assert response.json() == {
            "transaction_id": "tx_100",
            "user_id": payer.pk,
            "status": "completed",
            "applied": True,
            "setup_password_url": None,
        }
        assert payer.credits == 1000

    def test_redelivery_returns_200_without_crediting(self, client, payer):
        post_json(client, processor_payload(cpf=payer.national_id))

        response = post_json(client, processor_payload(cpf=payer.national_id))

        payer.refresh_from_db()
        assert response.status_code == 200
        assert response.json()["applied"] is False
        assert payer.credits == 1000

    def test_unknown_payer_gets_pending_account_and_setup_link(self, client, db):
        response = post_json(client, processor_payload())

        user = User.objects.get(national_id="11144477735")
        body = response.json()
        assert response.status_code == 200
        assert body["user_id"] == user.pk
        assert body["setup_password_url"].startswith(
            "https://app.example.com/setup-password/"
        )
        assert user.credential_state == CredentialState.PENDING
        assert user.email == "bruno@example.com"
        assert user.name == "Bruno Lima"
        assert user.phone == "11912345678"
        assert user.credits == 1000

    def test_invalid_payer_email_gets_placeholder(self, client, db):
        post_json(client, processor_payload(email="not-an-email"))

        user = User.objects.get(national_id="11144477735")
        assert user.has_placeholder_email is True

    def test_long_payer_name_is_cut_to_column_size(self, client, db):
        response = post_json(client, processor_payload(name="Bruno " * 40))

        user = User.objects.get(national_id="11144477735")
        assert response.status_code == 200
        assert len(user.name) <= 100
        assert user.credits == 1000

    def test_unknown_payer_pending_payment_is_404(self, client, db):
        response = post_json(client, processor_payload(status="pendente"))

        assert response.status_code == 404
        assert response.json()["error_code"] == "UNKNOWN_PAYER"
        assert not User.objects.exists()

    def test_snake_case_keys(self, client, payer):
        payload = processor_payload(national_id=payer.national_id, transaction_id="tx_9")
        del payload["cpf"]
        del payload["transactionId"]

        response = post_json(client, payload)

        assert response.status_code == 200
        assert response.json()["transaction_id"] == "tx_9"
