"""
Subscriptions admin configuration.

This file imports admin configurations from the ledger submodule
and registers plan and subscription models with the Django admin.
"""

from django.contrib import admin

from subscriptions.ledger.admin import PlatformWalletAdmin, WalletTransactionAdmin
from subscriptions.models import PaymentRecord, SubscriptionPlan, UserSubscription

__all__ = [
    "PlatformWalletAdmin",
    "WalletTransactionAdmin",
    "SubscriptionPlanAdmin",
    "UserSubscriptionAdmin",
]


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "artist",
        "price_amount",
        "price_currency",
        "split_platform_percent",
        "split_artist_percent",
        "is_active",
        "subscriber_count",
    ]
    list_filter = ["is_active", "price_currency"]
    search_fields = ["name", "artist__name"]
    readonly_fields = ["id", "subscriber_count", "created_at", "updated_at"]
    raw_id_fields = ["artist"]
    ordering = ["-created_at"]


class PaymentRecordInline(admin.TabularInline):
    model = PaymentRecord
    extra = 0
    can_delete = False
    readonly_fields = [
        "timestamp",
        "amount",
        "currency",
        "payment_method",
        "transaction_id",
        "status",
    ]
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(UserSubscription)
class UserSubscriptionAdmin(admin.ModelAdmin):
    """
    Subscriptions are read-only here: status changes go through the
    lifecycle service and the payment webhook.
    """

    list_display = [
        "id",
        "user",
        "artist",
        "plan",
        "status",
        "end_date",
        "auto_renew",
        "version",
    ]
    list_filter = ["status", "auto_renew"]
    search_fields = ["id", "user__email", "artist__name", "payment_history__transaction_id"]
    readonly_fields = [
        "id",
        "user",
        "plan",
        "artist",
        "status",
        "start_date",
        "end_date",
        "cancellation_date",
        "last_renewal_date",
        "next_renewal_date",
        "version",
        "created_at",
        "updated_at",
    ]
    inlines = [PaymentRecordInline]
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False
