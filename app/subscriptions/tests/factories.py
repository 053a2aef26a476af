"""
Factory Boy factories for subscription test data.

Usage:
    from subscriptions.tests.factories import (
        PaymentRecordFactory,
        SubscriptionPlanFactory,
        UserSubscriptionFactory,
    )

    plan = SubscriptionPlanFactory(price_amount=Decimal("9.99"))
    subscription = UserSubscriptionFactory(plan=plan)
    active = UserSubscriptionFactory(plan=plan, status=SubscriptionStatus.ACTIVE)
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone

from artists.tests.factories import ArtistFactory
from authentication.tests.factories import UserFactory
from subscriptions.models import PaymentRecord, SubscriptionPlan, UserSubscription
from subscriptions.state_machines import PaymentStatus, SubscriptionStatus


class SubscriptionPlanFactory(factory.django.DjangoModelFactory):
    """Active USD plan at 9.99 with the default 20/80 split."""

    class Meta:
        model = SubscriptionPlan

    artist = factory.SubFactory(ArtistFactory)
    name = factory.Sequence(lambda n: f"Tier {n}")
    description = ""
    price_amount = Decimal("9.99")
    price_currency = "USD"
    benefits = factory.LazyFunction(lambda: ["Early access"])
    duration_days = 30
    split_platform_percent = 20
    split_artist_percent = 80
    is_active = True
    subscriber_count = 0


class UserSubscriptionFactory(factory.django.DjangoModelFactory):
    """
    Pending subscription for a fresh user.

    status is written directly, bypassing FSM transitions, so tests can
    start from any state.
    """

    class Meta:
        model = UserSubscription

    user = factory.SubFactory(UserFactory)
    plan = factory.SubFactory(SubscriptionPlanFactory)
    artist = factory.LazyAttribute(lambda o: o.plan.artist)
    status = SubscriptionStatus.PENDING
    start_date = factory.LazyFunction(timezone.now)
    end_date = factory.LazyAttribute(lambda o: o.start_date + timedelta(days=o.plan.duration_days))
    auto_renew = True


class PaymentRecordFactory(factory.django.DjangoModelFactory):
    """Pending payment with a unique provider reference."""

    class Meta:
        model = PaymentRecord

    subscription = factory.SubFactory(UserSubscriptionFactory)
    amount = factory.LazyAttribute(lambda o: o.subscription.plan.price_amount)
    currency = factory.LazyAttribute(lambda o: o.subscription.plan.price_currency)
    payment_method = "card"
    transaction_id = factory.LazyFunction(lambda: f"ref_{uuid.uuid4().hex[:16]}")
    status = PaymentStatus.PENDING
    timestamp = factory.LazyFunction(timezone.now)
