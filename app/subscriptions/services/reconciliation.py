"""
Payment reconciliation service.

Applies payment provider webhooks to the ledger:

1. Verify the HMAC-SHA512 signature over the raw body (401 on mismatch).
2. Parse {reference, status, data} (400 on malformed payloads).
3. In one transaction, lock the payment record matching the reference
   (404 if none). If it already succeeded, stop: redelivered webhooks
   must not credit wallets twice.
4. Record the payment status. On success, activate the subscription and
   credit the artist and platform wallets with their split shares.

Any failure inside step 3-4 rolls the whole transaction back, so the
payment record keeps its previous status and the webhook can be retried.

Usage:
    from subscriptions.services import PaymentReconciliationService

    outcome = PaymentReconciliationService.handle_webhook(request.body, signature)
    outcome.already_processed  # True for a redelivery
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction
from django_fsm import TransitionNotAllowed

from artists.services import ArtistWalletService
from core.services import BaseService
from subscriptions.adapters import PaymentProviderAdapter
from subscriptions.exceptions import (
    AlreadySubscribedError,
    InvalidStateTransitionError,
    InvalidWebhookPayloadError,
    SubscriptionNotFoundError,
)
from subscriptions.ledger import WalletTransactionType, ledger
from subscriptions.models import PENDING_TRANSACTION_ID, PaymentRecord, UserSubscription
from subscriptions.state_machines import PaymentStatus

if TYPE_CHECKING:
    from decimal import Decimal
    from typing import Any


@dataclass(frozen=True)
class PaymentWebhookEvent:
    """Parsed webhook body."""

    reference: str
    status: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == PaymentStatus.SUCCESS

    @classmethod
    def from_payload(cls, payload: bytes) -> PaymentWebhookEvent:
        """
        Raises:
            InvalidWebhookPayloadError: Not JSON, not an object, or no reference
        """
        try:
            body = json.loads(payload)
        except (TypeError, ValueError, UnicodeDecodeError):
            raise InvalidWebhookPayloadError("Webhook body is not valid JSON")

        if not isinstance(body, dict):
            raise InvalidWebhookPayloadError("Webhook body must be a JSON object")

        reference = body.get("reference")
        if not isinstance(reference, str) or not reference or reference == PENDING_TRANSACTION_ID:
            raise InvalidWebhookPayloadError(
                "Webhook body has no usable reference",
                details={"reference": reference},
            )

        data = body.get("data")
        return cls(
            reference=reference,
            # Anything other than an explicit success is a failed payment
            status=PaymentStatus.SUCCESS if body.get("status") == "success" else PaymentStatus.FAILED,
            data=data if isinstance(data, dict) else {},
        )


@dataclass
class ReconciliationOutcome:
    """
    Result of applying one webhook.

    Attributes:
        payment: The matched payment record after the update
        subscription: Its subscription
        already_processed: True when the payment had already succeeded
        artist_amount / platform_amount: Credited shares (None unless credited)
    """

    payment: PaymentRecord
    subscription: UserSubscription
    already_processed: bool = False
    artist_amount: Decimal | None = None
    platform_amount: Decimal | None = None


class PaymentReconciliationService(BaseService):
    """Verify provider webhooks and apply them to subscriptions and wallets."""

    @classmethod
    def handle_webhook(cls, payload: bytes, signature: str | None) -> ReconciliationOutcome:
        """
        Verify, parse and apply a provider webhook.

        Raises:
            WebhookSignatureError: Missing or invalid signature (401)
            InvalidWebhookPayloadError: Malformed body (400)
            SubscriptionNotFoundError: Unknown reference (404)
            AlreadySubscribedError: Activation would create a second active
                subscription to the same artist (409)
            InvalidStateTransitionError: Subscription can no longer be activated (409)
        """
        PaymentProviderAdapter.verify_webhook_signature(payload, signature)
        event = PaymentWebhookEvent.from_payload(payload)
        return cls.apply_payment_event(event)

    @classmethod
    def apply_payment_event(cls, event: PaymentWebhookEvent) -> ReconciliationOutcome:
        """Apply an already verified webhook event in a single transaction."""
        logger = cls.get_logger()
        log_context = {"reference": event.reference, "webhook_status": event.status}

        with transaction.atomic():
            payment = (
                PaymentRecord.objects.select_for_update()
                .filter(transaction_id=event.reference)
                .first()
            )
            if payment is None:
                logger.warning("Webhook reference matches no payment", extra=log_context)
                raise SubscriptionNotFoundError(
                    f"No subscription payment with reference {event.reference}",
                    details={"reference": event.reference},
                )

            subscription = (
                UserSubscription.objects.select_for_update()
                .select_related("plan")
                .get(pk=payment.subscription_id)
            )
            log_context["subscription_id"] = str(subscription.id)

            if payment.status == PaymentStatus.SUCCESS:
                logger.info("Webhook already processed, skipping", extra=log_context)
                return ReconciliationOutcome(
                    payment=payment,
                    subscription=subscription,
                    already_processed=True,
                )

            if not event.succeeded:
                if payment.status != PaymentStatus.FAILED:
                    payment.status = PaymentStatus.FAILED
                    payment.save(update_fields=["status", "updated_at"])
                logger.info("Payment failed, subscription stays pending", extra=log_context)
                return ReconciliationOutcome(payment=payment, subscription=subscription)

            payment.status = PaymentStatus.SUCCESS
            payment.save(update_fields=["status", "updated_at"])

            try:
                cls._activate(subscription)
            except (AlreadySubscribedError, InvalidStateTransitionError) as e:
                # The provider has captured the money; it needs a manual refund
                logger.error(
                    "Captured payment cannot activate subscription, refund required",
                    extra={
                        **log_context,
                        "error_code": e.error_code,
                        "amount": str(payment.amount),
                        "currency": payment.currency,
                        "user_id": subscription.user_id,
                    },
                )
                raise
            artist_amount, platform_amount = cls._credit_wallets(subscription, payment)

        logger.info(
            "Payment reconciled, subscription active",
            extra={
                **log_context,
                "artist_amount": str(artist_amount),
                "platform_amount": str(platform_amount),
                "currency": payment.currency,
            },
        )
        return ReconciliationOutcome(
            payment=payment,
            subscription=subscription,
            artist_amount=artist_amount,
            platform_amount=platform_amount,
        )

    @classmethod
    def _activate(cls, subscription: UserSubscription) -> None:
        """Transition to active; the partial unique constraint guards duplicates."""
        try:
            subscription.activate()
        except TransitionNotAllowed:
            raise InvalidStateTransitionError(
                f"Cannot activate subscription in '{subscription.status}' state",
                details={
                    "subscription_id": str(subscription.id),
                    "current_state": subscription.status,
                    "target_state": "active",
                },
            )

        try:
            with transaction.atomic():
                subscription.save()
        except IntegrityError:
            raise AlreadySubscribedError(
                "User already has an active subscription to this artist",
                details={
                    "subscription_id": str(subscription.id),
                    "artist_id": str(subscription.artist_id),
                },
            )

    @classmethod
    def _credit_wallets(
        cls,
        subscription: UserSubscription,
        payment: PaymentRecord,
    ) -> tuple[Decimal, Decimal]:
        """Credit both split shares; zero shares are skipped."""
        plan = subscription.plan
        split = plan.revenue_split

        if split.artist_amount > 0:
            ArtistWalletService.credit(plan.artist_id, split.artist_amount)

        if split.platform_amount > 0:
            ledger.credit(
                plan.price_currency,
                split.platform_amount,
                WalletTransactionType.SUBSCRIPTION,
                description=f"Platform share of subscription {subscription.id} ({plan.name})",
                reference=payment.transaction_id,
            )

        return split.artist_amount, split.platform_amount
