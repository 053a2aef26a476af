"""
Tests for the subscription expiry sweep.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from subscriptions.state_machines import SubscriptionStatus
from subscriptions.tasks import expire_lapsed_subscriptions
from subscriptions.tests.factories import UserSubscriptionFactory


@pytest.mark.django_db
class TestExpireLapsedSubscriptions:
    """Tests for expire_lapsed_subscriptions."""

    def test_expires_active_subscription_past_end_date(self, user, plan):
        subscription = UserSubscriptionFactory(
            user=user,
            plan=plan,
            status=SubscriptionStatus.ACTIVE,
        )

        with freeze_time(subscription.end_date + timedelta(minutes=1)):
            result = expire_lapsed_subscriptions()

        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.EXPIRED
        assert result == {"expired_count": 1, "abandoned_count": 0}

    def test_cancelled_at_period_end_still_expires(self, user, plan):
        """Cancelling only turned off auto_renew; the sweep ends it."""
        subscription = UserSubscriptionFactory(
            user=user,
            plan=plan,
            status=SubscriptionStatus.ACTIVE,
            auto_renew=False,
            cancellation_date=timezone.now(),
        )

        with freeze_time(subscription.end_date + timedelta(hours=1)):
            expire_lapsed_subscriptions()

        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.EXPIRED

    def test_abandons_unpaid_pending_subscription(self, pending_subscription):
        with freeze_time(pending_subscription.end_date + timedelta(minutes=1)):
            result = expire_lapsed_subscriptions()

        pending_subscription.refresh_from_db()
        assert pending_subscription.status == SubscriptionStatus.CANCELLED
        assert result == {"expired_count": 0, "abandoned_count": 1}

    def test_leaves_current_subscriptions_alone(self, active_subscription):
        with freeze_time(active_subscription.end_date - timedelta(days=1)):
            result = expire_lapsed_subscriptions()

        active_subscription.refresh_from_db()
        assert active_subscription.status == SubscriptionStatus.ACTIVE
        assert result == {"expired_count": 0, "abandoned_count": 0}

    def test_ignores_terminal_states(self, user, plan):
        expired = UserSubscriptionFactory(user=user, plan=plan, status=SubscriptionStatus.EXPIRED)

        with freeze_time(expired.end_date + timedelta(days=1)):
            result = expire_lapsed_subscriptions()

        assert result == {"expired_count": 0, "abandoned_count": 0}

    def test_expiry_bumps_version(self, active_subscription):
        with freeze_time(active_subscription.end_date + timedelta(minutes=1)):
            expire_lapsed_subscriptions()

        active_subscription.refresh_from_db()
        assert active_subscription.version == 2
