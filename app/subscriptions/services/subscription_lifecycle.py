"""
Subscription lifecycle service.

subscribe() is a saga, because the payment provider cannot take part in a
database transaction:

1. In one transaction: check for an active subscription to the artist and
   insert a pending subscription with a pending payment record.
2. Outside any transaction: ask the provider to initialize the payment.
3a. Provider or finalization failed: delete the pending subscription
    (compensation) and raise PaymentInitiationFailedError. Nothing is left
    behind.
3b. Provider succeeded: store the provider reference on the payment record
    and increment the plan's subscriber count.

The pre-check in step 1 is a fast path. The guarantee of one active
subscription per (user, artist) comes from the partial unique constraint
on UserSubscription, which rejects a second activation at write time.

Usage:
    from subscriptions.services import SubscriptionLifecycleService

    result = SubscriptionLifecycleService.subscribe(user.id, plan.id, "card")
    redirect_to(result.payment_url)

    SubscriptionLifecycleService.cancel(result.subscription.id)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.db.models import F, Prefetch
from django.utils import timezone

from core.services import BaseService
from subscriptions.adapters import InitializeTransactionParams, PaymentProviderAdapter
from subscriptions.exceptions import (
    AlreadySubscribedError,
    InvalidStateTransitionError,
    PaymentInitiationFailedError,
    PaymentProviderError,
    PlanInactiveError,
    PlanNotFoundError,
    SubscriptionNotFoundError,
    UserNotFoundError,
)
from subscriptions.locks import check_version
from subscriptions.models import (
    PENDING_TRANSACTION_ID,
    PaymentRecord,
    SubscriptionPlan,
    UserSubscription,
)
from subscriptions.state_machines import PaymentStatus, SubscriptionStatus

if TYPE_CHECKING:
    import uuid


# States in which cancel() is meaningful
CANCELLABLE_STATES = frozenset([SubscriptionStatus.PENDING, SubscriptionStatus.ACTIVE])


@dataclass
class SubscribeResult:
    """
    Outcome of a successful subscribe().

    Attributes:
        subscription: The pending subscription
        payment: Its pending payment record (carries the provider reference)
        payment_url: Checkout URL to hand to the client
    """

    subscription: UserSubscription
    payment: PaymentRecord
    payment_url: str

    @property
    def reference(self) -> str:
        return self.payment.transaction_id


class SubscriptionLifecycleService(BaseService):
    """Create, cancel and query user subscriptions."""

    # =========================================================================
    # Subscribe
    # =========================================================================

    @classmethod
    def subscribe(
        cls,
        user_id: int,
        plan_id: uuid.UUID,
        payment_method: str = "card",
    ) -> SubscribeResult:
        """
        Subscribe a user to a plan and start the payment.

        Raises:
            UserNotFoundError: Unknown user
            PlanNotFoundError: Unknown plan
            PlanInactiveError: Plan no longer accepts subscriptions
            AlreadySubscribedError: User already has an active subscription
                to the plan's artist
            PaymentInitiationFailedError: Provider call or finalization failed;
                the pending subscription has been removed
        """
        logger = cls.get_logger()
        user = get_user_model().objects.filter(pk=user_id).first()
        if user is None:
            raise UserNotFoundError(
                f"User {user_id} not found",
                details={"user_id": user_id},
            )

        # Step 1: persist pending state
        with cls.atomic():
            plan = SubscriptionPlan.objects.select_for_update().filter(id=plan_id).first()
            if plan is None:
                raise PlanNotFoundError(
                    f"Subscription plan {plan_id} not found",
                    details={"plan_id": str(plan_id)},
                )
            if not plan.is_active:
                raise PlanInactiveError(
                    "This plan is no longer accepting subscriptions",
                    details={"plan_id": str(plan_id)},
                )

            already_active = UserSubscription.objects.filter(
                user=user,
                artist_id=plan.artist_id,
                status=SubscriptionStatus.ACTIVE,
            ).exists()
            if already_active:
                raise AlreadySubscribedError(
                    "User already has an active subscription to this artist",
                    details={"user_id": user.pk, "artist_id": str(plan.artist_id)},
                )

            now = timezone.now()
            subscription = UserSubscription.objects.create(
                user=user,
                plan=plan,
                artist_id=plan.artist_id,
                status=SubscriptionStatus.PENDING,
                start_date=now,
                end_date=now + timedelta(days=plan.duration_days),
            )
            payment = PaymentRecord.objects.create(
                subscription=subscription,
                amount=plan.price_amount,
                currency=plan.price_currency,
                payment_method=payment_method,
                transaction_id=PENDING_TRANSACTION_ID,
                status=PaymentStatus.PENDING,
                timestamp=now,
            )

        log_context = {
            "subscription_id": str(subscription.id),
            "plan_id": str(plan.id),
            "user_id": user.pk,
        }

        # Steps 2 and 3b must both succeed or the pending rows are discarded
        try:
            # Step 2: external call, outside the transaction
            initialized = PaymentProviderAdapter.initialize_transaction(
                InitializeTransactionParams(
                    email=user.email,
                    amount_minor_units=plan.amount_minor_units,
                    currency=plan.price_currency,
                    metadata={
                        "subscription_id": str(subscription.id),
                        "plan_id": str(plan.id),
                        "artist_id": str(plan.artist_id),
                    },
                )
            )

            # Step 3b: finalize
            with cls.atomic():
                PaymentRecord.objects.filter(pk=payment.pk).update(
                    transaction_id=initialized.reference,
                    updated_at=timezone.now(),
                )
                SubscriptionPlan.objects.filter(pk=plan.pk).update(
                    subscriber_count=F("subscriber_count") + 1,
                    updated_at=timezone.now(),
                )
        except PaymentProviderError as e:
            # Step 3a: compensate
            cls._discard_pending(subscription)
            logger.warning(
                "Payment initialization failed, pending subscription removed",
                extra={**log_context, "error_code": e.error_code, "retryable": e.is_retryable},
            )
            error = PaymentInitiationFailedError(
                "Could not start the payment, please try again",
                provider_status=e.provider_status,
                details={"provider_error": e.error_code},
            )
            error.is_retryable = e.is_retryable
            raise error from e
        except Exception as e:
            # Step 3a: compensate
            cls._discard_pending(subscription)
            logger.error(
                f"Unexpected error starting payment: {type(e).__name__}",
                extra=log_context,
                exc_info=True,
            )
            raise PaymentInitiationFailedError(
                "Could not start the payment, please try again",
                details={"error_type": type(e).__name__},
            ) from e

        payment.refresh_from_db()

        logger.info(
            "Subscription created, awaiting payment",
            extra={**log_context, "reference": initialized.reference},
        )
        return SubscribeResult(
            subscription=subscription,
            payment=payment,
            payment_url=initialized.authorization_url,
        )

    @classmethod
    def _discard_pending(cls, subscription: UserSubscription) -> None:
        """Delete a pending subscription and its payment history."""
        with cls.atomic():
            UserSubscription.objects.filter(
                pk=subscription.pk,
                status=SubscriptionStatus.PENDING,
            ).delete()

    # =========================================================================
    # Cancel
    # =========================================================================

    @classmethod
    def cancel(
        cls,
        subscription_id: uuid.UUID,
        expected_version: int | None = None,
    ) -> UserSubscription:
        """
        Cancel at period end.

        Turns off auto_renew and records the cancellation date. The status is
        left unchanged: an active subscription stays usable until end_date.

        Args:
            subscription_id: Subscription to cancel
            expected_version: Version the caller last read; when given, a
                concurrent modification raises StaleRecordError

        Raises:
            SubscriptionNotFoundError: Unknown subscription
            StaleRecordError: expected_version is out of date
            InvalidStateTransitionError: Subscription already ended
        """
        with cls.atomic():
            if expected_version is None:
                subscription = (
                    UserSubscription.objects.select_for_update()
                    .filter(id=subscription_id)
                    .first()
                )
                if subscription is None:
                    raise SubscriptionNotFoundError(
                        f"Subscription {subscription_id} not found",
                        details={"subscription_id": str(subscription_id)},
                    )
            else:
                if not UserSubscription.objects.filter(id=subscription_id).exists():
                    raise SubscriptionNotFoundError(
                        f"Subscription {subscription_id} not found",
                        details={"subscription_id": str(subscription_id)},
                    )
                subscription = check_version(UserSubscription, subscription_id, expected_version)

            if subscription.status not in CANCELLABLE_STATES:
                raise InvalidStateTransitionError(
                    f"Cannot cancel subscription in '{subscription.status}' state",
                    details={
                        "subscription_id": str(subscription.id),
                        "current_state": subscription.status,
                    },
                )

            if subscription.cancellation_date is None or subscription.auto_renew:
                subscription.auto_renew = False
                if subscription.cancellation_date is None:
                    subscription.cancellation_date = timezone.now()
                subscription.save(update_fields=["auto_renew", "cancellation_date"])

        cls.get_logger().info(
            "Subscription cancelled at period end",
            extra={
                "subscription_id": str(subscription.id),
                "status": subscription.status,
                "end_date": subscription.end_date.isoformat(),
            },
        )
        return subscription

    # =========================================================================
    # Queries
    # =========================================================================

    @classmethod
    def get_subscription(cls, subscription_id: uuid.UUID) -> UserSubscription:
        """
        Subscription with plan, artist and ordered payment history.

        Raises:
            SubscriptionNotFoundError: Unknown subscription
        """
        subscription = (
            UserSubscription.objects.select_related("plan", "artist")
            .prefetch_related(
                Prefetch(
                    "payment_history",
                    queryset=PaymentRecord.objects.order_by("timestamp", "created_at"),
                )
            )
            .filter(id=subscription_id)
            .first()
        )
        if subscription is None:
            raise SubscriptionNotFoundError(
                f"Subscription {subscription_id} not found",
                details={"subscription_id": str(subscription_id)},
            )
        return subscription

    @classmethod
    def list_active_subscriptions(cls, user_id: int) -> list[UserSubscription]:
        """Active subscriptions of a user with their plans, newest first."""
        return list(
            UserSubscription.objects.select_related("plan", "artist")
            .filter(user_id=user_id, status=SubscriptionStatus.ACTIVE)
            .order_by("-created_at")
        )
