"""
Pytest fixtures for subscription tests.

Usage:
    def test_activation(pending_subscription):
        pending_subscription.activate()
        pending_subscription.save()
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from artists.tests.factories import ArtistFactory
from authentication.tests.factories import UserFactory
from subscriptions.state_machines import SubscriptionStatus
from subscriptions.tests.factories import (
    PaymentRecordFactory,
    SubscriptionPlanFactory,
    UserSubscriptionFactory,
)


@pytest.fixture
def user(db):
    return UserFactory()


@pytest.fixture
def staff_user(db):
    return UserFactory(is_staff=True)


@pytest.fixture
def artist(db):
    return ArtistFactory()


@pytest.fixture
def plan(db, artist):
    """9.99 USD plan, 20% platform / 80% artist."""
    return SubscriptionPlanFactory(artist=artist, price_amount=Decimal("9.99"))


@pytest.fixture
def pending_subscription(db, user, plan):
    return UserSubscriptionFactory(user=user, plan=plan)


@pytest.fixture
def active_subscription(db, user, plan):
    return UserSubscriptionFactory(user=user, plan=plan, status=SubscriptionStatus.ACTIVE)


@pytest.fixture
def pending_payment(db, pending_subscription):
    return PaymentRecordFactory(subscription=pending_subscription, transaction_id="ref_pending_1")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_client(user):
    """API client authenticated as `user`."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
