from rest_framework import serializers
from .services import REPORT_PERIODS


class ReportQuerySerializer(serializers.Serializer):
    """
    Validate report query parameters.

    Query Parameters:
        period (str): monthly, quarterly or yearly (default monthly)
        output (str): html or pdf (default html)
    """

    period = serializers.ChoiceField(choices=REPORT_PERIODS, default='monthly')
    output = serializers.ChoiceField(choices=['html', 'pdf'], default='html')
