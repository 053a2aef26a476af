"""
Base service layer patterns for business logic encapsulation.

Services encapsulate business logic separate from views and models.
Views handle HTTP concerns, models handle data, services handle logic.

Error policy:
    Services raise core.exceptions subclasses for expected failures
    (not found, validation, conflicts). Views let them propagate to the
    DRF exception handler; Celery tasks and the webhook endpoint catch
    them explicitly.

Usage:
    from core.services import BaseService

    class PlanCatalogService(BaseService):
        @classmethod
        def deactivate_plan(cls, plan_id):
            with cls.atomic():
                plan = SubscriptionPlan.objects.select_for_update().get(id=plan_id)
                plan.is_active = False
                plan.save(update_fields=["is_active", "updated_at"])

            cls.get_logger().info("Plan deactivated", extra={"plan_id": str(plan_id)})
            return plan
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services that talk to external systems accept their adapter in
          __init__ so tests can inject a fake
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        A thin wrapper around Django's transaction.atomic() that makes
        transaction boundaries explicit in service code. Nested use
        creates a savepoint.
        """
        with transaction.atomic():
            yield
