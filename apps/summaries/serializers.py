"""
Serializers for summaries app.

Input Serializers:
    MonthQuerySerializer - year/month or YYYY-MM period
    YearQuerySerializer - calendar year
    HistoryQuerySerializer - required date range

Response Serializers:
    MonthlySummarySerializer - cached monthly figures
    HomeSummarySerializer - home screen figures
    YearlySummarySerializer - yearly totals with monthly breakdown
    HistoryEntrySerializer - one money movement
"""

from rest_framework import serializers
from apps.ledger.exceptions import InvalidPeriodError
from apps.ledger.periods import parse_period
from .models import MonthlySummary


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class MonthQuerySerializer(serializers.Serializer):
    """
    Validate the month a summary is requested for.

    Query Parameters:
        period (str): Month in YYYY-MM format (e.g., '2025-03')
        year (int): Calendar year
        month (int): Calendar month, 1-12

    Note:
        'period' takes precedence over 'year' and 'month'.
    """

    period = serializers.CharField(required=False, allow_blank=True)
    year = serializers.IntegerField(required=False, min_value=1, max_value=9999)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)

    def validate(self, attrs):
        period = attrs.pop('period', None)
        if period:
            try:
                attrs['year'], attrs['month'] = parse_period(period)
            except InvalidPeriodError as e:
                raise serializers.ValidationError({'period': str(e)})

        if attrs.get('year') is None or attrs.get('month') is None:
            raise serializers.ValidationError('Provide year and month, or period as YYYY-MM')
        return attrs


class YearQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1, max_value=9999)


class HistoryQuerySerializer(serializers.Serializer):
    """Validate the date range of the transaction history."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()

    def validate(self, attrs):
        if attrs['start_date'] > attrs['end_date']:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })
        return attrs


# =============================================================================
# Response Serializers
# =============================================================================

class MonthlySummarySerializer(serializers.ModelSerializer):
    """Cached monthly summary."""

    key = serializers.CharField(read_only=True)

    class Meta:
        model = MonthlySummary
        fields = [
            'key',
            'year',
            'month',
            'monthly_income',
            'monthly_expenses',
            'net_balance',
            'vendor_transaction_count',
            'customer_transaction_count',
            'vendor_payment_count',
            'customer_payment_count',
            'top_vendors',
            'top_customers',
            'updated_at',
        ]
        read_only_fields = fields


class HomeSummarySerializer(serializers.Serializer):
    vendor_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    customer_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    monthly_summary = MonthlySummarySerializer()


class MonthBreakdownSerializer(serializers.Serializer):
    month = serializers.IntegerField()
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    net_balance = serializers.DecimalField(max_digits=14, decimal_places=2)


class YearlySummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    yearly_income = serializers.DecimalField(max_digits=14, decimal_places=2)
    yearly_expenses = serializers.DecimalField(max_digits=14, decimal_places=2)
    yearly_net_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    monthly_breakdown = MonthBreakdownSerializer(many=True)


class HistoryEntrySerializer(serializers.Serializer):
    """
    One money movement.

    ``type`` is ``expense`` for a vendor transaction and ``income`` for a
    customer payment; ``payment_for`` is the date of the sale a customer
    payment belongs to.
    """

    id = serializers.CharField()
    type = serializers.ChoiceField(choices=['expense', 'income'])
    date = serializers.DateField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    entity_id = serializers.UUIDField()
    entity_name = serializers.CharField()
    transaction_id = serializers.UUIDField()
    payment_for = serializers.DateField(allow_null=True)
