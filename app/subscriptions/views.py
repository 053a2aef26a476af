"""
API views for subscriptions, plans and the platform wallet.

URL Structure:
    /api/v1/plans/{artist_id}/                          GET, POST
    /api/v1/plans/detail/{plan_id}/deactivate/          POST
    /api/v1/subscriptions/{user_id}/                    GET
    /api/v1/subscriptions/{user_id}/{plan_id}/          POST
    /api/v1/subscriptions/detail/{subscription_id}/     GET
    /api/v1/subscriptions/{subscription_id}/cancel/     POST
    /api/v1/wallets/platform/{currency}/                GET
    /api/v1/wallets/platform/{currency}/withdrawals/    POST

Design Decisions:
    - Views only parse input, check ownership and render output
    - Business rules live in the service layer; domain exceptions propagate
      to core.exception_handler, which renders them with their status code
    - Cancel accepts the expected version through If-Match or a body field
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from artists.services import ArtistWalletService
from core.exceptions import PermissionDeniedError, ValidationError
from subscriptions.ledger import WalletTransactionType, ledger
from subscriptions.serializers import (
    CancelSubscriptionSerializer,
    PlanCreateSerializer,
    PlatformWalletSerializer,
    SubscribeSerializer,
    SubscriptionPlanSerializer,
    UserSubscriptionDetailSerializer,
    UserSubscriptionSerializer,
    WalletTransactionSerializer,
    WithdrawalSerializer,
)
from subscriptions.services import (
    CreatePlanParams,
    PlanCatalogService,
    SubscriptionLifecycleService,
)


def _ensure_self_or_staff(request, user_id: int) -> None:
    if request.user.pk != user_id and not request.user.is_staff:
        raise PermissionDeniedError(
            "You can only manage your own subscriptions",
            error_code="NOT_SUBSCRIPTION_OWNER",
        )


def _parse_if_match(value: str | None) -> int | None:
    """Read a version number from an If-Match header ("3", "\"3\"" or W/"3")."""
    if not value:
        return None
    raw = value.strip()
    if raw.startswith("W/"):
        raw = raw[2:]
    raw = raw.strip('"')
    try:
        version = int(raw)
    except ValueError:
        raise ValidationError(
            "If-Match must carry the subscription version",
            error_code="INVALID_IF_MATCH",
            details={"if_match": value},
        )
    if version < 1:
        raise ValidationError(
            "If-Match must carry the subscription version",
            error_code="INVALID_IF_MATCH",
            details={"if_match": value},
        )
    return version


# =============================================================================
# Plans
# =============================================================================


class ArtistPlansView(APIView):
    """
    Plans of one artist.

    GET /api/v1/plans/{artist_id}/
        Active plans, newest first. Public.

    POST /api/v1/plans/{artist_id}/
        Create a plan. The artist's owner or staff only.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(
        operation_id="list_artist_plans",
        summary="List active plans",
        responses={200: SubscriptionPlanSerializer(many=True)},
        tags=["Subscriptions - Plans"],
    )
    def get(self, request, artist_id):
        plans = PlanCatalogService.list_active_plans(artist_id)
        return Response(SubscriptionPlanSerializer(plans, many=True).data)

    @extend_schema(
        operation_id="create_artist_plan",
        summary="Create plan",
        description=(
            "Create a subscription plan for an artist. Split percentages default "
            "to 20% platform / 80% artist and must add up to 100."
        ),
        request=PlanCreateSerializer,
        responses={
            201: SubscriptionPlanSerializer,
            400: OpenApiResponse(description="Invalid price, split or duration"),
            403: OpenApiResponse(description="Not the artist's owner"),
            404: OpenApiResponse(description="Artist not found"),
        },
        tags=["Subscriptions - Plans"],
    )
    def post(self, request, artist_id):
        artist = ArtistWalletService.get_artist(artist_id)
        if not artist.is_managed_by(request.user):
            raise PermissionDeniedError(
                "Only the artist can create plans",
                error_code="NOT_ARTIST_OWNER",
            )

        serializer = PlanCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        plan = PlanCatalogService.create_plan(
            artist.id,
            CreatePlanParams(**serializer.validated_data),
        )
        return Response(SubscriptionPlanSerializer(plan).data, status=status.HTTP_201_CREATED)


class DeactivatePlanView(APIView):
    """POST /api/v1/plans/detail/{plan_id}/deactivate/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="deactivate_plan",
        summary="Deactivate plan",
        request=None,
        responses={
            200: SubscriptionPlanSerializer,
            403: OpenApiResponse(description="Not the artist's owner"),
            404: OpenApiResponse(description="Plan not found"),
        },
        tags=["Subscriptions - Plans"],
    )
    def post(self, request, plan_id):
        plan = PlanCatalogService.get_plan(plan_id)
        if not plan.artist.is_managed_by(request.user):
            raise PermissionDeniedError(
                "Only the artist can deactivate plans",
                error_code="NOT_ARTIST_OWNER",
            )
        plan = PlanCatalogService.deactivate_plan(plan.id)
        return Response(SubscriptionPlanSerializer(plan).data)


# =============================================================================
# Subscriptions
# =============================================================================


class SubscribeView(APIView):
    """
    Subscribe a user to a plan.

    POST /api/v1/subscriptions/{user_id}/{plan_id}/

    Returns the pending subscription and the checkout URL. The subscription
    becomes active once the provider confirms the payment by webhook.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="subscribe",
        summary="Subscribe to plan",
        request=SubscribeSerializer,
        responses={
            201: OpenApiResponse(description="Pending subscription, payment_url and reference"),
            404: OpenApiResponse(description="User or plan not found"),
            409: OpenApiResponse(description="Already subscribed or plan inactive"),
            502: OpenApiResponse(description="Payment provider failed"),
        },
        tags=["Subscriptions"],
    )
    def post(self, request, user_id, plan_id):
        _ensure_self_or_staff(request, user_id)

        serializer = SubscribeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = SubscriptionLifecycleService.subscribe(
            user_id,
            plan_id,
            payment_method=serializer.validated_data["payment_method"],
        )
        return Response(
            {
                "subscription": UserSubscriptionSerializer(result.subscription).data,
                "payment_url": result.payment_url,
                "reference": result.reference,
            },
            status=status.HTTP_201_CREATED,
        )


class ActiveSubscriptionsView(APIView):
    """GET /api/v1/subscriptions/{user_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_active_subscriptions",
        summary="List active subscriptions",
        responses={200: UserSubscriptionSerializer(many=True)},
        tags=["Subscriptions"],
    )
    def get(self, request, user_id):
        _ensure_self_or_staff(request, user_id)
        subscriptions = SubscriptionLifecycleService.list_active_subscriptions(user_id)
        return Response(UserSubscriptionSerializer(subscriptions, many=True).data)


class SubscriptionDetailView(APIView):
    """GET /api/v1/subscriptions/detail/{subscription_id}/"""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_subscription",
        summary="Get subscription",
        responses={
            200: UserSubscriptionDetailSerializer,
            404: OpenApiResponse(description="Subscription not found"),
        },
        tags=["Subscriptions"],
    )
    def get(self, request, subscription_id):
        subscription = SubscriptionLifecycleService.get_subscription(subscription_id)
        _ensure_self_or_staff(request, subscription.user_id)
        return Response(UserSubscriptionDetailSerializer(subscription).data)


class CancelSubscriptionView(APIView):
    """
    Cancel a subscription at period end.

    POST /api/v1/subscriptions/{subscription_id}/cancel/

    Optional optimistic locking: send the version last read either as an
    If-Match header or as {"version": n} in the body. A stale version is
    rejected with 409.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="cancel_subscription",
        summary="Cancel subscription",
        request=CancelSubscriptionSerializer,
        parameters=[
            OpenApiParameter(
                name="If-Match",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.HEADER,
                description="Expected subscription version",
                required=False,
            ),
        ],
        responses={
            200: UserSubscriptionSerializer,
            404: OpenApiResponse(description="Subscription not found"),
            409: OpenApiResponse(description="Stale version or subscription already ended"),
        },
        tags=["Subscriptions"],
    )
    def post(self, request, subscription_id):
        subscription = SubscriptionLifecycleService.get_subscription(subscription_id)
        _ensure_self_or_staff(request, subscription.user_id)

        serializer = CancelSubscriptionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expected_version = _parse_if_match(request.headers.get("If-Match"))
        if expected_version is None:
            expected_version = serializer.validated_data.get("version")

        subscription = SubscriptionLifecycleService.cancel(
            subscription_id,
            expected_version=expected_version,
        )
        return Response(UserSubscriptionSerializer(subscription).data)


# =============================================================================
# Platform Wallet
# =============================================================================


class PlatformWalletView(APIView):
    """
    Platform wallet balance and recent transactions. Staff only.

    GET /api/v1/wallets/platform/{currency}/?limit=50
    """

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="get_platform_wallet",
        summary="Get platform wallet",
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Number of transactions (default 50, max 200)",
                required=False,
            ),
        ],
        responses={
            200: OpenApiResponse(description="Wallet and its most recent transactions"),
            400: OpenApiResponse(description="Unsupported currency"),
        },
        tags=["Wallets"],
    )
    def get(self, request, currency):
        try:
            limit = min(max(int(request.query_params.get("limit", 50)), 1), 200)
        except (TypeError, ValueError):
            limit = 50

        wallet = ledger.get_wallet(currency)
        transactions = ledger.list_transactions(wallet.currency, limit=limit)
        return Response(
            {
                "wallet": PlatformWalletSerializer(wallet).data,
                "transactions": WalletTransactionSerializer(transactions, many=True).data,
            }
        )


class PlatformWithdrawalView(APIView):
    """POST /api/v1/wallets/platform/{currency}/withdrawals/"""

    permission_classes = [IsAdminUser]

    @extend_schema(
        operation_id="withdraw_from_platform_wallet",
        summary="Withdraw from platform wallet",
        request=WithdrawalSerializer,
        responses={
            201: PlatformWalletSerializer,
            400: OpenApiResponse(description="Invalid amount or currency"),
            409: OpenApiResponse(description="Insufficient balance"),
        },
        tags=["Wallets"],
    )
    def post(self, request, currency):
        serializer = WithdrawalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        wallet = ledger.debit(
            currency,
            serializer.validated_data["amount"],
            WalletTransactionType.WITHDRAWAL,
            description=serializer.validated_data["description"] or "Platform withdrawal",
            reference=serializer.validated_data["reference"],
        )
        return Response(PlatformWalletSerializer(wallet).data, status=status.HTTP_201_CREATED)
