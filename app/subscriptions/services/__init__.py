"""
Subscription services.

This module provides:
- PlanCatalogService: Create, list and deactivate artist plans
- SubscriptionLifecycleService: Subscribe (saga with compensation), cancel at period end
- PaymentReconciliationService: Verify and apply payment provider webhooks

Usage:
    from subscriptions.services import SubscriptionLifecycleService

    result = SubscriptionLifecycleService.subscribe(user.id, plan.id, "card")
"""

from subscriptions.services.plan_catalog import CreatePlanParams, PlanCatalogService
from subscriptions.services.reconciliation import (
    PaymentReconciliationService,
    PaymentWebhookEvent,
    ReconciliationOutcome,
)
from subscriptions.services.subscription_lifecycle import (
    SubscribeResult,
    SubscriptionLifecycleService,
)

__all__ = [
    "CreatePlanParams",
    "PaymentReconciliationService",
    "PaymentWebhookEvent",
    "PlanCatalogService",
    "ReconciliationOutcome",
    "SubscribeResult",
    "SubscriptionLifecycleService",
]
