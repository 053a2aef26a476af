"""
URL configuration for the subscriptions API.

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from subscriptions.views import (
    ActiveSubscriptionsView,
    ArtistPlansView,
    CancelSubscriptionView,
    DeactivatePlanView,
    PlatformWalletView,
    PlatformWithdrawalView,
    SubscribeView,
    SubscriptionDetailView,
)
from subscriptions.webhooks.views import payment_webhook

app_name = "subscriptions"

urlpatterns = [
    # Plans
    path("plans/<uuid:artist_id>/", ArtistPlansView.as_view(), name="artist-plans"),
    path(
        "plans/detail/<uuid:plan_id>/deactivate/",
        DeactivatePlanView.as_view(),
        name="deactivate-plan",
    ),
    # Subscriptions
    path(
        "subscriptions/<int:user_id>/",
        ActiveSubscriptionsView.as_view(),
        name="active-subscriptions",
    ),
    path(
        "subscriptions/<int:user_id>/<uuid:plan_id>/",
        SubscribeView.as_view(),
        name="subscribe",
    ),
    path(
        "subscriptions/detail/<uuid:subscription_id>/",
        SubscriptionDetailView.as_view(),
        name="subscription-detail",
    ),
    path(
        "subscriptions/<uuid:subscription_id>/cancel/",
        CancelSubscriptionView.as_view(),
        name="cancel-subscription",
    ),
    # Webhooks
    path("webhooks/payment/", payment_webhook, name="payment-webhook"),
    # Platform wallet
    path(
        "wallets/platform/<str:currency>/",
        PlatformWalletView.as_view(),
        name="platform-wallet",
    ),
    path(
        "wallets/platform/<str:currency>/withdrawals/",
        PlatformWithdrawalView.as_view(),
        name="platform-withdrawal",
    ),
]
