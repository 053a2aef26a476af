"""
Webhook endpoint view for the payment provider.

The view:
1. Reads the raw body and the X-Provider-Signature header
2. Hands both to PaymentReconciliationService, which verifies the
   signature and applies the payment in one transaction
3. Maps the outcome to an HTTP status the provider understands

Reconciliation is short (a handful of row updates), so it runs inline and
the response tells the provider whether to retry.

Usage:
    # In urls.py
    from subscriptions.webhooks.views import payment_webhook

    urlpatterns = [
        path("webhooks/payment/", payment_webhook, name="payment-webhook"),
    ]
"""

from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.exceptions import BaseApplicationError
from subscriptions.adapters import PaymentProviderAdapter
from subscriptions.services import PaymentReconciliationService

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def payment_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive and apply payment provider webhooks.

    Security:
    - HMAC-SHA512 signature over the exact raw body, constant-time compare
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - A payment that already succeeded is acknowledged with 200 and
      "already_processed" without touching any wallet

    Returns:
        JsonResponse with status:
        - 200: Applied or already applied
        - 400: Malformed payload
        - 401: Missing or invalid signature
        - 404: Reference matches no subscription payment
        - 409: Subscription cannot be activated
    """
    payload = request.body
    signature = request.headers.get(PaymentProviderAdapter.SIGNATURE_HEADER, "")

    try:
        outcome = PaymentReconciliationService.handle_webhook(payload, signature)
    except BaseApplicationError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(
            f"Webhook rejected: {e.error_code}",
            extra={"error_code": e.error_code, "status_code": e.status_code},
        )
        return JsonResponse(e.to_dict(), status=e.status_code)

    status = "already_processed" if outcome.already_processed else "processed"
    logger.info(
        "Webhook handled",
        extra={
            "reference": outcome.payment.transaction_id,
            "subscription_id": str(outcome.subscription.id),
            "payment_status": outcome.payment.status,
            "result": status,
        },
    )
    return JsonResponse(
        {
            "status": status,
            "reference": outcome.payment.transaction_id,
            "payment_status": outcome.payment.status,
            "subscription_status": outcome.subscription.status,
        },
        status=200,
    )
