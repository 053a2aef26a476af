"""
Tests for the payment webhook endpoint.

Tests cover:
- Signature verification over the raw body
- Status codes the provider sees for each outcome
- Idempotent redelivery
"""

import json
from decimal import Decimal

import pytest
from django.test import RequestFactory
from django.urls import reverse

from subscriptions.adapters import PaymentProviderAdapter
from subscriptions.ledger import ledger
from subscriptions.state_machines import SubscriptionStatus
from subscriptions.webhooks.views import payment_webhook


# =============================================================================
# Setup
# =============================================================================


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


def make_webhook_request(rf, payload: bytes, signature: str | None = None):
    """Create a POST request to the webhook endpoint."""
    headers = {}
    if signature is not None:
        headers["HTTP_X_PROVIDER_SIGNATURE"] = signature
    return rf.post(
        "/api/v1/webhooks/payment/",
        data=payload,
        content_type="application/json",
        **headers,
    )


def encode(body: dict) -> bytes:
    return json.dumps(body).encode("utf-8")


# =============================================================================
# Signature Verification Tests
# =============================================================================


@pytest.mark.django_db
class TestPaymentWebhookSignature:
    """Tests for signature verification."""

    def test_missing_signature_returns_401(self, rf, pending_payment):
        request = make_webhook_request(rf, encode({"reference": "ref_pending_1"}))

        response = payment_webhook(request)

        assert response.status_code == 401
        assert json.loads(response.content)["error_code"] == "MISSING_SIGNATURE"

    def test_invalid_signature_returns_401(self, rf, pending_payment):
        payload = encode({"reference": "ref_pending_1", "status": "success"})
        request = make_webhook_request(rf, payload, signature="0" * 128)

        response = payment_webhook(request)

        assert response.status_code == 401
        pending_payment.subscription.refresh_from_db()
        assert pending_payment.subscription.status == SubscriptionStatus.PENDING


# =============================================================================
# Outcome Tests
# =============================================================================


@pytest.mark.django_db
class TestPaymentWebhookOutcomes:
    """Tests for processed, duplicate and rejected webhooks."""

    def test_success_activates_subscription(self, rf, pending_payment):
        payload = encode({"reference": "ref_pending_1", "status": "success"})
        request = make_webhook_request(
            rf, payload, PaymentProviderAdapter.compute_signature(payload)
        )

        response = payment_webhook(request)

        body = json.loads(response.content)
        assert response.status_code == 200
        assert body == {
            "status": "processed",
            "reference": "ref_pending_1",
            "payment_status": "success",
            "subscription_status": "active",
        }
        assert ledger.get_balance("USD").amount == Decimal("1.998")

    def test_redelivery_returns_already_processed(self, rf, pending_payment):
        payload = encode({"reference": "ref_pending_1", "status": "success"})
        signature = PaymentProviderAdapter.compute_signature(payload)

        payment_webhook(make_webhook_request(rf, payload, signature))
        response = payment_webhook(make_webhook_request(rf, payload, signature))

        assert response.status_code == 200
        assert json.loads(response.content)["status"] == "already_processed"
        assert ledger.get_balance("USD").amount == Decimal("1.998")

    def test_unknown_reference_returns_404(self, rf, db):
        payload = encode({"reference": "ref_missing", "status": "success"})
        request = make_webhook_request(
            rf, payload, PaymentProviderAdapter.compute_signature(payload)
        )

        response = payment_webhook(request)

        assert response.status_code == 404
        assert json.loads(response.content)["error_code"] == "SUBSCRIPTION_NOT_FOUND"

    def test_malformed_payload_returns_400(self, rf, db):
        payload = b"{not json"
        request = make_webhook_request(
            rf, payload, PaymentProviderAdapter.compute_signature(payload)
        )

        response = payment_webhook(request)

        assert response.status_code == 400

    def test_get_not_allowed(self, client, db):
        response = client.get(reverse("subscriptions:payment-webhook"))

        assert response.status_code == 405

    def test_routed_through_url_without_csrf(self, db, pending_payment):
        """External POST without CSRF token reaches the view."""
        from django.test import Client

        client = Client(enforce_csrf_checks=True)
        payload = encode({"reference": "ref_pending_1", "status": "failed"})

        response = client.post(
            reverse("subscriptions:payment-webhook"),
            data=payload,
            content_type="application/json",
            HTTP_X_PROVIDER_SIGNATURE=PaymentProviderAdapter.compute_signature(payload),
        )

        assert response.status_code == 200
        assert json.loads(response.content)["payment_status"] == "failed"
