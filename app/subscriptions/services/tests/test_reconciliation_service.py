"""
Tests for PaymentReconciliationService.

Tests cover:
- Successful payment: activation and exact wallet splits
- Idempotency: redelivered webhooks credit nothing
- Failed payments
- Signature and payload rejection
- Activation conflicts roll the whole webhook back
"""

import json
from decimal import Decimal
from unittest.mock import patch

import pytest

from artists.models import Artist
from subscriptions.adapters import PaymentProviderAdapter
from subscriptions.exceptions import (
    AlreadySubscribedError,
    InvalidStateTransitionError,
    InvalidWebhookPayloadError,
    SubscriptionNotFoundError,
    WebhookSignatureError,
)
from subscriptions.ledger import WalletTransaction, WalletTransactionType, ledger
from subscriptions.services import PaymentReconciliationService, PaymentWebhookEvent
from subscriptions.state_machines import PaymentStatus, SubscriptionStatus
from subscriptions.tests.factories import (
    PaymentRecordFactory,
    SubscriptionPlanFactory,
    UserSubscriptionFactory,
)


def signed(body: dict) -> tuple[bytes, str]:
    payload = json.dumps(body).encode("utf-8")
    return payload, PaymentProviderAdapter.compute_signature(payload)


def artist_balance(artist_id) -> Decimal:
    return Artist.objects.values_list("wallet_balance", flat=True).get(id=artist_id)


# =============================================================================
# Successful Payments
# =============================================================================


@pytest.mark.django_db
class TestSuccessfulPayment:
    """Tests for a verified success webhook."""

    def test_activates_and_splits_revenue(self, pending_payment):
        """9.99 at 20/80 credits 7.992 to the artist and 1.998 to the platform."""
        subscription = pending_payment.subscription
        payload, signature = signed({"reference": "ref_pending_1", "status": "success"})

        outcome = PaymentReconciliationService.handle_webhook(payload, signature)

        assert outcome.already_processed is False
        assert outcome.artist_amount == Decimal("7.992")
        assert outcome.platform_amount == Decimal("1.998")

        subscription.refresh_from_db()
        pending_payment.refresh_from_db()
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.last_renewal_date is not None
        assert pending_payment.status == PaymentStatus.SUCCESS
        assert artist_balance(subscription.artist_id) == Decimal("7.992")
        assert ledger.get_balance("USD").amount == Decimal("1.998")

    def test_platform_credit_is_logged_with_reference(self, pending_payment):
        payload, signature = signed({"reference": "ref_pending_1", "status": "success"})

        PaymentReconciliationService.handle_webhook(payload, signature)

        txn = WalletTransaction.objects.get()
        assert txn.type == WalletTransactionType.SUBSCRIPTION
        assert txn.reference == "ref_pending_1"
        assert txn.amount == Decimal("1.998")

    def test_zero_platform_share_is_not_credited(self, user):
        plan = SubscriptionPlanFactory(
            price_amount=Decimal("10"),
            split_platform_percent=0,
            split_artist_percent=100,
        )
        subscription = UserSubscriptionFactory(user=user, plan=plan)
        PaymentRecordFactory(subscription=subscription, transaction_id="ref_zero")
        payload, signature = signed({"reference": "ref_zero", "status": "success"})

        PaymentReconciliationService.handle_webhook(payload, signature)

        assert artist_balance(plan.artist_id) == Decimal("10")
        assert WalletTransaction.objects.count() == 0

    def test_payment_in_plan_currency(self, user):
        plan = SubscriptionPlanFactory(price_amount=Decimal("5000"), price_currency="NGN")
        subscription = UserSubscriptionFactory(user=user, plan=plan)
        PaymentRecordFactory(subscription=subscription, transaction_id="ref_ngn")
        payload, signature = signed({"reference": "ref_ngn", "status": "success"})

        PaymentReconciliationService.handle_webhook(payload, signature)

        assert ledger.get_balance("NGN").amount == Decimal("1000")
        assert ledger.get_balance("USD").amount == Decimal("0")


# =============================================================================
# Idempotency
# =============================================================================


@pytest.mark.django_db
class TestIdempotency:
    """Redelivered webhooks must not credit twice."""

    def test_second_delivery_is_a_no_op(self, pending_payment):
        payload, signature = signed({"reference": "ref_pending_1", "status": "success"})

        PaymentReconciliationService.handle_webhook(payload, signature)
        outcome = PaymentReconciliationService.handle_webhook(payload, signature)

        assert outcome.already_processed is True
        assert artist_balance(pending_payment.subscription.artist_id) == Decimal("7.992")
        assert ledger.get_balance("USD").amount == Decimal("1.998")
        assert WalletTransaction.objects.count() == 1

    def test_failure_after_success_is_ignored(self, pending_payment):
        success, success_sig = signed({"reference": "ref_pending_1", "status": "success"})
        failed, failed_sig = signed({"reference": "ref_pending_1", "status": "failed"})

        PaymentReconciliationService.handle_webhook(success, success_sig)
        outcome = PaymentReconciliationService.handle_webhook(failed, failed_sig)

        assert outcome.already_processed is True
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.SUCCESS


# =============================================================================
# Failed Payments
# =============================================================================


@pytest.mark.django_db
class TestFailedPayment:
    """Tests for non-success webhooks."""

    @pytest.mark.parametrize("status", ["failed", "abandoned", "reversed"])
    def test_marks_payment_failed_and_keeps_subscription_pending(self, pending_payment, status):
        payload, signature = signed({"reference": "ref_pending_1", "status": status})

        outcome = PaymentReconciliationService.handle_webhook(payload, signature)

        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.FAILED
        assert outcome.subscription.status == SubscriptionStatus.PENDING
        assert outcome.artist_amount is None
        assert WalletTransaction.objects.count() == 0

    def test_success_after_failure_activates(self, pending_payment):
        failed, failed_sig = signed({"reference": "ref_pending_1", "status": "failed"})
        success, success_sig = signed({"reference": "ref_pending_1", "status": "success"})

        PaymentReconciliationService.handle_webhook(failed, failed_sig)
        outcome = PaymentReconciliationService.handle_webhook(success, success_sig)

        assert outcome.subscription.status == SubscriptionStatus.ACTIVE


# =============================================================================
# Rejections
# =============================================================================


@pytest.mark.django_db
class TestRejections:
    """Tests for webhooks that must not change any state."""

    def test_tampered_body_rejected(self, pending_payment):
        """Body changed after signing fails verification."""
        payload, signature = signed({"reference": "ref_pending_1", "status": "failed"})
        tampered = payload.replace(b"failed", b"success")

        with pytest.raises(WebhookSignatureError) as exc_info:
            PaymentReconciliationService.handle_webhook(tampered, signature)

        assert exc_info.value.status_code == 401
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_missing_signature_rejected(self, pending_payment):
        payload, _ = signed({"reference": "ref_pending_1", "status": "success"})

        with pytest.raises(WebhookSignatureError):
            PaymentReconciliationService.handle_webhook(payload, None)

    def test_unknown_reference(self, db):
        payload, signature = signed({"reference": "ref_unknown", "status": "success"})

        with pytest.raises(SubscriptionNotFoundError) as exc_info:
            PaymentReconciliationService.handle_webhook(payload, signature)

        assert exc_info.value.status_code == 404

    @pytest.mark.parametrize(
        "body",
        [b"not json", b"[1, 2]", b'{"status": "success"}', b'{"reference": "pending"}'],
    )
    def test_malformed_payload(self, db, body):
        signature = PaymentProviderAdapter.compute_signature(body)

        with pytest.raises(InvalidWebhookPayloadError):
            PaymentReconciliationService.handle_webhook(body, signature)

    def test_second_active_subscription_rolls_back(self, user, plan, active_subscription):
        """A pending subscription whose payment lands while another is active."""
        pending = UserSubscriptionFactory(user=user, plan=plan)
        payment = PaymentRecordFactory(subscription=pending, transaction_id="ref_conflict")
        payload, signature = signed({"reference": "ref_conflict", "status": "success"})

        with pytest.raises(AlreadySubscribedError):
            PaymentReconciliationService.handle_webhook(payload, signature)

        payment.refresh_from_db()
        pending.refresh_from_db()
        assert payment.status == PaymentStatus.PENDING
        assert pending.status == SubscriptionStatus.PENDING
        assert artist_balance(plan.artist_id) == Decimal("0")
        assert WalletTransaction.objects.count() == 0

    def test_conflicting_activation_logs_refund_needed(self, user, plan, active_subscription):
        pending = UserSubscriptionFactory(user=user, plan=plan)
        PaymentRecordFactory(subscription=pending, transaction_id="ref_refund")
        payload, signature = signed({"reference": "ref_refund", "status": "success"})

        with patch.object(PaymentReconciliationService, "get_logger") as mock_get_logger:
            with pytest.raises(AlreadySubscribedError):
                PaymentReconciliationService.handle_webhook(payload, signature)

        mock_logger = mock_get_logger.return_value
        mock_logger.error.assert_called_once()
        extra = mock_logger.error.call_args.kwargs["extra"]
        assert extra["reference"] == "ref_refund"
        assert extra["error_code"] == "ALREADY_SUBSCRIBED"
        assert extra["amount"] == "9.99"
        assert extra["currency"] == "USD"

    def test_cancelled_subscription_cannot_activate(self, user, plan):
        cancelled = UserSubscriptionFactory(user=user, plan=plan, status=SubscriptionStatus.CANCELLED)
        PaymentRecordFactory(subscription=cancelled, transaction_id="ref_late")
        payload, signature = signed({"reference": "ref_late", "status": "success"})

        with pytest.raises(InvalidStateTransitionError):
            PaymentReconciliationService.handle_webhook(payload, signature)


class TestPaymentWebhookEvent:
    """Tests for PaymentWebhookEvent.from_payload()."""

    def test_parses_success(self):
        event = PaymentWebhookEvent.from_payload(
            b'{"reference": "ref_1", "status": "success", "data": {"amount": 999}}'
        )

        assert event.reference == "ref_1"
        assert event.succeeded is True
        assert event.data == {"amount": 999}

    def test_non_dict_data_becomes_empty(self):
        event = PaymentWebhookEvent.from_payload(b'{"reference": "ref_1", "data": "x"}')

        assert event.status == PaymentStatus.FAILED
        assert event.data == {}
