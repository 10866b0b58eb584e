"""
Analysis views.

This module provides API views for:
- Submitting and listing analyses
- Status and detail of one analysis
- Sharing a completed analysis publicly

Related files:
    - serializers.py: Request/response serialization
    - services.py: ReservationService, AnalysisQueryService
    - webhooks.py: Pipeline status webhook
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from analysis.exceptions import AnalysisNotFoundError
from analysis.models import AnalysisStatus
from analysis.serializers import (
    AnalysisDetailSerializer,
    AnalysisSubmitSerializer,
    AnalysisSummarySerializer,
    AnalysisTeaserSerializer,
    SharedAnalysisSerializer,
    VisibilitySerializer,
)
from analysis.services import AnalysisQueryService, ReservationService
from core.pagination import AnalysisPagination
from core.responses import error_response
from core.services import ServiceResult


class AnalysisListCreateView(APIView):
    """
    GET: Paginated analyses of the current account (optional ?status=).
    POST: Submit a new analysis, reserving its credits.

    URL: /api/v1/analyses/

    POST responses:
        201: {"analysis": {...}, "credits": <balance after debit>}
        402: INSUFFICIENT_CREDITS with details.required / details.available
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List analyses",
        parameters=[
            OpenApiParameter("status", str, enum=AnalysisStatus.values),
        ],
        responses={200: AnalysisSummarySerializer(many=True)},
        tags=["Analyses"],
    )
    def get(self, request):
        queryset = AnalysisQueryService.list_for_owner(
            request.user, status=request.query_params.get("status")
        )
        paginator = AnalysisPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(
            AnalysisSummarySerializer(page, many=True).data
        )

    @extend_schema(
        summary="Submit analysis",
        request=AnalysisSubmitSerializer,
        responses={201: AnalysisSummarySerializer},
        tags=["Analyses"],
    )
    def post(self, request):
        serializer = AnalysisSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReservationService.reserve(request.user, **serializer.validated_data)
        if not result:
            return error_response(result)

        request.user.refresh_from_db(fields=["credits"])
        return Response(
            {
                "analysis": AnalysisSummarySerializer(result.data).data,
                "credits": request.user.credits,
            },
            status=status.HTTP_201_CREATED,
        )


class AnalysisStatusView(APIView):
    """
    GET: Status of one of the current account's analyses.

    URL: /api/v1/analyses/<id>/status/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Analysis status",
        responses={200: AnalysisSummarySerializer},
        tags=["Analyses"],
    )
    def get(self, request, analysis_id):
        try:
            analysis = AnalysisQueryService.get_for_owner(request.user, analysis_id)
        except AnalysisNotFoundError as exc:
            return error_response(ServiceResult.from_error(exc))
        return Response({"analysis": AnalysisSummarySerializer(analysis).data})


class AnalysisDetailView(APIView):
    """
    GET: One analysis.

    The owner sees the full report. Anyone else sees only a teaser, and
    only when the owner made the analysis public.

    URL: /api/v1/analyses/<id>/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Analysis detail",
        responses={200: AnalysisDetailSerializer},
        tags=["Analyses"],
    )
    def get(self, request, analysis_id):
        try:
            analysis = AnalysisQueryService.get(analysis_id)
        except AnalysisNotFoundError as exc:
            return error_response(ServiceResult.from_error(exc))

        if request.user.is_authenticated and analysis.owner_id == request.user.pk:
            return Response({"analysis": AnalysisDetailSerializer(analysis).data})

        if not analysis.is_public:
            return Response(
                {"error": "Access denied", "error_code": "FORBIDDEN"},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response({"analysis": AnalysisTeaserSerializer(analysis).data})


class AnalysisVisibilityView(APIView):
    """
    PUT: Make a completed analysis public or private.

    URL: /api/v1/analyses/<id>/public/

    Request body:
        {"is_public": true}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Set analysis visibility",
        request=VisibilitySerializer,
        tags=["Analyses"],
    )
    def put(self, request, analysis_id):
        serializer = VisibilitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AnalysisQueryService.set_public(
            request.user, analysis_id, serializer.validated_data["is_public"]
        )
        if not result:
            return error_response(result)

        return Response(
            {
                "is_public": result.data.is_public,
                "share_token": result.data.share_token,
            }
        )

    patch = put


class SharedAnalysisView(APIView):
    """
    GET: Public analysis by share token.

    URL: /api/v1/analyses/share/<token>/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Shared analysis",
        responses={200: SharedAnalysisSerializer},
        tags=["Analyses"],
    )
    def get(self, request, token):
        try:
            analysis = AnalysisQueryService.get_shared(token)
        except AnalysisNotFoundError as exc:
            return error_response(ServiceResult.from_error(exc))
        return Response({"analysis": SharedAnalysisSerializer(analysis).data})
