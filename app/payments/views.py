"""
Credit views.

This module provides API views for:
- Balance and paginated ledger rows of the current account
- The plan catalogue
- Starting a checkout
- Filtered credit history with per-kind totals

Related files:
    - serializers.py: Request/response serialization
    - services.py: CheckoutService
    - ledger/services.py: LedgerService.history_stats
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.pagination import StandardPagination
from core.responses import error_response
from payments.ledger.models import TransactionKind
from payments.ledger.services import LedgerService
from payments.models import Plan
from payments.serializers import (
    CheckoutSerializer,
    CreditTransactionSerializer,
    HistoryQuerySerializer,
    PlanSerializer,
)
from payments.services import CheckoutService

HISTORY_LIMIT = 100


class CreditBalanceView(APIView):
    """
    GET: Balance and paginated ledger rows (optional ?kind=).

    URL: /api/v1/credits/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Credit balance",
        parameters=[OpenApiParameter("kind", str, enum=TransactionKind.values)],
        tags=["Credits"],
    )
    def get(self, request):
        user = request.user
        queryset = user.credit_transactions.select_related("related_analysis")
        if kind := request.query_params.get("kind"):
            queryset = queryset.filter(kind=kind)

        paginator = StandardPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return Response(
            {
                "credits": user.credits,
                "plan_tier": user.plan_tier,
                "count": paginator.page.paginator.count,
                "next": paginator.get_next_link(),
                "previous": paginator.get_previous_link(),
                "transactions": CreditTransactionSerializer(page, many=True).data,
            }
        )


class PlanListView(APIView):
    """
    GET: Plans on sale.

    URL: /api/v1/credits/plans/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="List plans",
        responses={200: PlanSerializer(many=True)},
        tags=["Credits"],
    )
    def get(self, request):
        plans = Plan.objects.active()
        return Response({"plans": PlanSerializer(plans, many=True).data})


class CheckoutView(APIView):
    """
    POST: Start buying a plan.

    Creates a pending purchase row whose id is the reference the payment
    processor must echo back in its notification.

    URL: /api/v1/credits/purchase/

    Responses:
        201: {"transaction": {...}, "plan": {...}, "payment_data": {...}}
        404: PLAN_NOT_FOUND
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Start checkout", request=CheckoutSerializer, tags=["Credits"])
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = CheckoutService.start_checkout(
            request.user, serializer.validated_data["plan_id"]
        )
        if not result:
            return error_response(result)

        session = result.data
        return Response(
            {
                "transaction": CreditTransactionSerializer(session.transaction).data,
                "plan": PlanSerializer(session.plan).data,
                "payment_data": session.payment_data,
            },
            status=status.HTTP_201_CREATED,
        )


class CreditHistoryView(APIView):
    """
    GET: Most recent ledger rows matching the filters, with totals.

    URL: /api/v1/credits/history/?kind=&status=&start_date=&end_date=
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Credit history",
        parameters=[HistoryQuerySerializer],
        tags=["Credits"],
    )
    def get(self, request):
        filters = HistoryQuerySerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        params = filters.validated_data

        queryset = request.user.credit_transactions.select_related("related_analysis")
        if "kind" in params:
            queryset = queryset.filter(kind=params["kind"])
        if "status" in params:
            queryset = queryset.filter(status=params["status"])
        if "start_date" in params:
            queryset = queryset.filter(created_at__date__gte=params["start_date"])
        if "end_date" in params:
            queryset = queryset.filter(created_at__date__lte=params["end_date"])

        stats = LedgerService.history_stats(queryset)
        return Response(
            {
                "transactions": CreditTransactionSerializer(
                    queryset[:HISTORY_LIMIT], many=True
                ).data,
                "stats": stats.to_dict(),
            }
        )
