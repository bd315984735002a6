from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.responses import error_response
from apps.ledger.serializers import ErrorResponseSerializer
from .serializers import ReportQuerySerializer
from . import services


@extend_schema(
    parameters=[
        OpenApiParameter('period', OpenApiTypes.STR, description="'monthly', 'quarterly' or 'yearly'", default='monthly'),
        OpenApiParameter('output', OpenApiTypes.STR, description="'html' or 'pdf'", default='html'),
    ],
    responses={
        (200, 'text/html'): OpenApiTypes.STR,
        (200, 'application/pdf'): OpenApiTypes.BINARY,
        400: ErrorResponseSerializer,
    },
    description="Render a vendors, customers, overall or vendor_payments report as HTML or PDF.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request, report_type):
    """Render a report - thin HTTP handler."""
    query_serializer = ReportQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = services.fetch_report_data(
            owner=request.user,
            report_type=report_type,
            period=params['period'],
        )
    except LedgerServiceError as e:
        return error_response(e)

    html = services.render_report_html(report_type, data, request.user.get_currency_symbol())

    if params['output'] == 'pdf':
        response = HttpResponse(services.export_pdf(html), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{data["file_name"]}.pdf"'
        return response

    return HttpResponse(html, content_type='text/html; charset=utf-8')
