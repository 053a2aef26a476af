"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints (simplejwt)
        token/                     - Obtain access/refresh pair
        token/refresh/             - Refresh access token
    /api/v1/                       - Subscription endpoints
        plans/{artist_id}/                        - List/create artist plans
        plans/detail/{plan_id}/deactivate/        - Deactivate plan
        subscriptions/{user_id}/                  - Active subscriptions of a user
        subscriptions/{user_id}/{plan_id}/        - Subscribe
        subscriptions/detail/{subscription_id}/   - Subscription with payment history
        subscriptions/{subscription_id}/cancel/   - Cancel at period end
        webhooks/payment/                         - Payment provider webhook (POST)
        wallets/platform/{currency}/              - Platform wallet (staff)
        wallets/platform/{currency}/withdrawals/  - Platform withdrawal (staff)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Authentication (simplejwt)
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # Plans, subscriptions, webhooks, wallets
    path("", include("subscriptions.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Subscriptions Admin"
admin.site.site_title = "Subscriptions Admin Portal"
admin.site.index_title = "Plans, subscriptions and wallets"
