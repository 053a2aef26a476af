"""
Serializers for the subscriptions API.

Serializer Hierarchy:
    SubscriptionPlanSerializer: Plan read model, price and split nested
    PlanCreateSerializer: Input for creating a plan
    PaymentRecordSerializer: Payment history entry
    UserSubscriptionSerializer: Subscription with its plan
    UserSubscriptionDetailSerializer: Adds the payment history
    SubscribeSerializer: Input for subscribe
    CancelSubscriptionSerializer: Optional expected version for cancel
    PlatformWalletSerializer / WalletTransactionSerializer: Ledger views
    WithdrawalSerializer: Input for platform wallet withdrawals

Design Decisions:
    - Read and write serializers are separate for clarity
    - price and split_percentage are nested objects in the API but flat
      columns on the model (source="*")
"""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from subscriptions.ledger.models import PlatformWallet, SupportedCurrency, WalletTransaction
from subscriptions.models import PaymentRecord, SubscriptionPlan, UserSubscription
from subscriptions.models.plan import (
    DEFAULT_ARTIST_PERCENT,
    DEFAULT_DURATION_DAYS,
    DEFAULT_PLATFORM_PERCENT,
)

# =============================================================================
# Plans
# =============================================================================


class PriceSerializer(serializers.Serializer):
    amount = serializers.DecimalField(
        source="price_amount",
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0"),
    )
    currency = serializers.ChoiceField(
        source="price_currency",
        choices=SupportedCurrency.choices,
        default=SupportedCurrency.USD,
    )


class SplitPercentageSerializer(serializers.Serializer):
    platform = serializers.IntegerField(
        source="split_platform_percent",
        min_value=0,
        max_value=100,
        default=DEFAULT_PLATFORM_PERCENT,
    )
    artist = serializers.IntegerField(
        source="split_artist_percent",
        min_value=0,
        max_value=100,
        default=DEFAULT_ARTIST_PERCENT,
    )


class SubscriptionPlanSerializer(serializers.ModelSerializer):
    """Plan as returned by the API."""

    artist_id = serializers.UUIDField(read_only=True)
    price = PriceSerializer(source="*", read_only=True)
    split_percentage = SplitPercentageSerializer(source="*", read_only=True)

    class Meta:
        model = SubscriptionPlan
        fields = [
            "id",
            "artist_id",
            "name",
            "description",
            "price",
            "benefits",
            "duration_days",
            "split_percentage",
            "is_active",
            "subscriber_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PlanCreateSerializer(serializers.Serializer):
    """
    Input for creating a plan.

    Example:
        {
            "name": "Gold",
            "price": {"amount": "9.99", "currency": "USD"},
            "split_percentage": {"platform": 20, "artist": 80},
            "duration_days": 30,
            "benefits": ["Early access"]
        }
    """

    name = serializers.CharField(max_length=120)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = PriceSerializer(source="*")
    benefits = serializers.ListField(
        child=serializers.CharField(max_length=255),
        required=False,
        default=list,
    )
    duration_days = serializers.IntegerField(min_value=1, default=DEFAULT_DURATION_DAYS)
    split_percentage = SplitPercentageSerializer(source="*", required=False)

    def validate(self, attrs):
        attrs.setdefault("split_platform_percent", DEFAULT_PLATFORM_PERCENT)
        attrs.setdefault("split_artist_percent", DEFAULT_ARTIST_PERCENT)
        return attrs


# =============================================================================
# Subscriptions
# =============================================================================


class PaymentRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentRecord
        fields = [
            "id",
            "amount",
            "currency",
            "payment_method",
            "transaction_id",
            "status",
            "timestamp",
        ]
        read_only_fields = fields


class UserSubscriptionSerializer(serializers.ModelSerializer):
    """Subscription with its plan."""

    user_id = serializers.IntegerField(read_only=True)
    artist_id = serializers.UUIDField(read_only=True)
    plan = SubscriptionPlanSerializer(read_only=True)

    class Meta:
        model = UserSubscription
        fields = [
            "id",
            "user_id",
            "artist_id",
            "plan",
            "status",
            "start_date",
            "end_date",
            "auto_renew",
            "cancellation_date",
            "last_renewal_date",
            "next_renewal_date",
            "version",
            "created_at",
        ]
        read_only_fields = fields


class UserSubscriptionDetailSerializer(UserSubscriptionSerializer):
    """Subscription with plan and ordered payment history."""

    payment_history = PaymentRecordSerializer(many=True, read_only=True)

    class Meta(UserSubscriptionSerializer.Meta):
        fields = UserSubscriptionSerializer.Meta.fields + ["payment_history"]
        read_only_fields = fields


class SubscribeSerializer(serializers.Serializer):
    payment_method = serializers.CharField(max_length=50, default="card")


class CancelSubscriptionSerializer(serializers.Serializer):
    version = serializers.IntegerField(min_value=1, required=False)


# =============================================================================
# Platform Wallet
# =============================================================================


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = ["id", "amount", "currency", "type", "description", "reference", "timestamp"]
        read_only_fields = fields


class PlatformWalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = PlatformWallet
        fields = ["currency", "balance", "version", "updated_at"]
        read_only_fields = fields


class WithdrawalSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=20, decimal_places=4)
    description = serializers.CharField(max_length=255, required=False, default="")
    reference = serializers.CharField(max_length=255, required=False, default="")
