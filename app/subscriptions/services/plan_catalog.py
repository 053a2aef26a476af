"""
Plan catalog service.

Artists define subscription plans; fans list an artist's active plans.

Usage:
    from subscriptions.services import CreatePlanParams, PlanCatalogService

    plan = PlanCatalogService.create_plan(
        artist.id,
        CreatePlanParams(name="Gold", price_amount=Decimal("9.99")),
    )
    plans = PlanCatalogService.list_active_plans(artist.id)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from artists.services import ArtistWalletService
from core.exceptions import ValidationError
from core.services import BaseService
from subscriptions.exceptions import InvalidSplitError, PlanNotFoundError
from subscriptions.ledger.models import SupportedCurrency
from subscriptions.models import SubscriptionPlan
from subscriptions.models.plan import (
    DEFAULT_ARTIST_PERCENT,
    DEFAULT_DURATION_DAYS,
    DEFAULT_PLATFORM_PERCENT,
)

if TYPE_CHECKING:
    import uuid


@dataclass
class CreatePlanParams:
    """Input for PlanCatalogService.create_plan()."""

    name: str
    price_amount: Decimal
    price_currency: str = SupportedCurrency.USD
    description: str = ""
    benefits: list[str] = field(default_factory=list)
    duration_days: int = DEFAULT_DURATION_DAYS
    split_platform_percent: int = DEFAULT_PLATFORM_PERCENT
    split_artist_percent: int = DEFAULT_ARTIST_PERCENT


class PlanCatalogService(BaseService):
    """Create, look up, list and deactivate subscription plans."""

    @classmethod
    def _validate(cls, params: CreatePlanParams) -> Decimal:
        if params.split_platform_percent + params.split_artist_percent != 100:
            raise InvalidSplitError(
                "Split percentages must add up to 100",
                details={
                    "platform": params.split_platform_percent,
                    "artist": params.split_artist_percent,
                },
            )
        if not (0 <= params.split_platform_percent <= 100 and 0 <= params.split_artist_percent <= 100):
            raise InvalidSplitError(
                "Split percentages must be between 0 and 100",
                details={
                    "platform": params.split_platform_percent,
                    "artist": params.split_artist_percent,
                },
            )

        try:
            price = Decimal(str(params.price_amount))
        except InvalidOperation:
            raise ValidationError(
                "Price must be a number",
                error_code="INVALID_PRICE",
                details={"price_amount": str(params.price_amount)},
            )
        if not price.is_finite() or price < 0:
            raise ValidationError(
                "Price cannot be negative",
                error_code="INVALID_PRICE",
                details={"price_amount": str(params.price_amount)},
            )

        if params.duration_days < 1:
            raise ValidationError(
                "Duration must be at least one day",
                error_code="INVALID_DURATION",
                details={"duration_days": params.duration_days},
            )
        if params.price_currency not in SupportedCurrency.values:
            raise ValidationError(
                f"Unsupported currency: {params.price_currency}",
                error_code="UNSUPPORTED_CURRENCY",
                details={"currency": params.price_currency},
            )
        if not params.name or not params.name.strip():
            raise ValidationError("Plan name is required", error_code="INVALID_NAME")
        return price

    @classmethod
    def create_plan(cls, artist_id: uuid.UUID, params: CreatePlanParams) -> SubscriptionPlan:
        """
        Create an active plan for an artist.

        Raises:
            ArtistNotFoundError: Unknown artist
            InvalidSplitError: Split does not sum to 100
            ValidationError: Negative price, duration below one day,
                unsupported currency or blank name
        """
        artist = ArtistWalletService.get_artist(artist_id)
        price = cls._validate(params)

        plan = SubscriptionPlan.objects.create(
            artist=artist,
            name=params.name.strip(),
            description=params.description,
            price_amount=price,
            price_currency=params.price_currency,
            benefits=list(params.benefits),
            duration_days=params.duration_days,
            split_platform_percent=params.split_platform_percent,
            split_artist_percent=params.split_artist_percent,
            is_active=True,
            subscriber_count=0,
        )

        cls.get_logger().info(
            "Subscription plan created",
            extra={
                "plan_id": str(plan.id),
                "artist_id": str(artist.id),
                "price": str(plan.price),
            },
        )
        return plan

    @classmethod
    def get_plan(cls, plan_id: uuid.UUID) -> SubscriptionPlan:
        """
        Raises:
            PlanNotFoundError: Unknown plan
        """
        plan = SubscriptionPlan.objects.select_related("artist").filter(id=plan_id).first()
        if plan is None:
            raise PlanNotFoundError(
                f"Subscription plan {plan_id} not found",
                details={"plan_id": str(plan_id)},
            )
        return plan

    @classmethod
    def list_active_plans(cls, artist_id: uuid.UUID) -> list[SubscriptionPlan]:
        """Active plans of an artist, newest first. Unknown artists yield []."""
        return list(
            SubscriptionPlan.objects.filter(artist_id=artist_id, is_active=True).order_by(
                "-created_at"
            )
        )

    @classmethod
    def deactivate_plan(cls, plan_id: uuid.UUID) -> SubscriptionPlan:
        """
        Stop accepting new subscriptions for a plan.

        Existing subscriptions keep running until they expire.
        """
        with cls.atomic():
            plan = SubscriptionPlan.objects.select_for_update().filter(id=plan_id).first()
            if plan is None:
                raise PlanNotFoundError(
                    f"Subscription plan {plan_id} not found",
                    details={"plan_id": str(plan_id)},
                )
            if plan.is_active:
                plan.is_active = False
                plan.save(update_fields=["is_active", "updated_at"])

        cls.get_logger().info("Subscription plan deactivated", extra={"plan_id": str(plan_id)})
        return plan
