from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.responses import error_response
from apps.ledger.serializers import ErrorResponseSerializer
from .serializers import (
    # Input serializers
    MonthQuerySerializer,
    YearQuerySerializer,
    HistoryQuerySerializer,
    # Response serializers
    MonthlySummarySerializer,
    HomeSummarySerializer,
    YearlySummarySerializer,
    HistoryEntrySerializer,
)
from . import services


MONTH_PARAMETERS = [
    OpenApiParameter('period', OpenApiTypes.STR, description='Month period (YYYY-MM)'),
    OpenApiParameter('year', OpenApiTypes.INT, description='Calendar year'),
    OpenApiParameter('month', OpenApiTypes.INT, description='Calendar month (1-12)'),
]


@extend_schema(
    parameters=MONTH_PARAMETERS,
    responses={200: MonthlySummarySerializer, 400: ErrorResponseSerializer},
    description="Get the cached summary of a month, recompiled first when stale.",
    tags=['summaries'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_summary(request):
    """Get monthly summary - thin HTTP handler."""
    query_serializer = MonthQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        summary = services.get_monthly_summary(owner=request.user, **query_serializer.validated_data)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(MonthlySummarySerializer(summary).data)


@extend_schema(
    responses={200: MonthlySummarySerializer},
    description="Get the summary of the current month.",
    tags=['summaries'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_monthly_summary(request):
    try:
        summary = services.get_current_monthly_summary(owner=request.user)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(MonthlySummarySerializer(summary).data)


@extend_schema(
    request=MonthQuerySerializer,
    responses={200: MonthlySummarySerializer, 400: ErrorResponseSerializer},
    description="Recompile a month from scratch and overwrite its cached summary.",
    tags=['summaries'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def recalculate_monthly_summary(request):
    """Force recomputation of a monthly summary - thin HTTP handler."""
    input_serializer = MonthQuerySerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)

    try:
        summary = services.calculate_monthly_summary(owner=request.user, **input_serializer.validated_data)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(MonthlySummarySerializer(summary).data)


@extend_schema(
    responses={200: HomeSummarySerializer},
    description="Get vendor and customer portfolio balances with the current month's summary.",
    tags=['summaries'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def home_summary(request):
    """Get home screen summary - thin HTTP handler."""
    try:
        data = services.get_home_summary(owner=request.user)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(HomeSummarySerializer(data).data)


@extend_schema(
    parameters=[OpenApiParameter('year', OpenApiTypes.INT, description='Calendar year', required=True)],
    responses={200: YearlySummarySerializer, 400: ErrorResponseSerializer},
    description="Get yearly income, expenses and net balance with a monthly breakdown.",
    tags=['summaries'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def yearly_summary(request):
    query_serializer = YearQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = services.get_yearly_summary(owner=request.user, **query_serializer.validated_data)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(YearlySummarySerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)', required=True),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)', required=True),
    ],
    responses={200: HistoryEntrySerializer(many=True), 400: ErrorResponseSerializer},
    description="Get vendor transactions (expenses) and customer payments (income) in a date range.",
    tags=['summaries'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_history(request):
    """Get transaction history - thin HTTP handler."""
    query_serializer = HistoryQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        entries = services.get_transaction_history(owner=request.user, **query_serializer.validated_data)
    except LedgerServiceError as e:
        return error_response(e)

    return Response(HistoryEntrySerializer(entries, many=True).data)
