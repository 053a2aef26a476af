"""
Celery tasks for subscriptions.

This module provides periodic tasks for:
- Expiring active subscriptions whose end_date has passed
- Abandoning pending subscriptions whose payment never arrived

Usage:
    from subscriptions.tasks import expire_lapsed_subscriptions

    # Scheduled hourly via celery-beat (see migration 0002)
    expire_lapsed_subscriptions.delay()
"""

from __future__ import annotations

import logging

from celery import shared_task
from django.db import transaction
from django.utils import timezone
from django_fsm import TransitionNotAllowed

from subscriptions.models import UserSubscription
from subscriptions.state_machines import SubscriptionStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

EXPIRY_BATCH_SIZE = 500


@shared_task
def expire_lapsed_subscriptions(batch_size: int = EXPIRY_BATCH_SIZE) -> dict:
    """
    Periodic task to end subscriptions past their end_date.

    - active past end_date -> expired (cancelled or not)
    - pending past end_date -> cancelled (payment never confirmed)

    Each row is re-read under a row lock in its own transaction, so a
    webhook that activates a subscription concurrently is never overwritten.

    Returns:
        Dict with expired_count and abandoned_count
    """
    now = timezone.now()

    candidate_ids = list(
        UserSubscription.objects.filter(
            status__in=[SubscriptionStatus.ACTIVE, SubscriptionStatus.PENDING],
            end_date__lte=now,
        )
        .order_by("end_date")
        .values_list("id", flat=True)[:batch_size]
    )

    expired_count = 0
    abandoned_count = 0
    for subscription_id in candidate_ids:
        with transaction.atomic():
            subscription = (
                UserSubscription.objects.select_for_update()
                .filter(id=subscription_id, end_date__lte=now)
                .first()
            )
            if subscription is None:
                continue

            try:
                if subscription.status == SubscriptionStatus.ACTIVE:
                    subscription.expire()
                    expired_count += 1
                elif subscription.status == SubscriptionStatus.PENDING:
                    subscription.abandon()
                    abandoned_count += 1
                else:
                    continue
            except TransitionNotAllowed:
                logger.warning(
                    "Skipping subscription with disallowed transition",
                    extra={
                        "subscription_id": str(subscription_id),
                        "status": subscription.status,
                    },
                )
                continue

            subscription.save()

        logger.info(
            "Subscription lapsed",
            extra={
                "subscription_id": str(subscription_id),
                "status": subscription.status,
                "end_date": subscription.end_date.isoformat(),
            },
        )

    if expired_count or abandoned_count:
        logger.info(
            f"Expired {expired_count} and abandoned {abandoned_count} subscriptions",
            extra={"expired_count": expired_count, "abandoned_count": abandoned_count},
        )

    return {"expired_count": expired_count, "abandoned_count": abandoned_count}
