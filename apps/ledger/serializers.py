from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class DateRangeFilterSerializer(serializers.Serializer):
    """
    Validate optional date window query parameters.

    Query Parameters:
        start_date (date): Include rows dated on or after this day
        end_date (date): Include rows dated on or before this day
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        """Validate date range."""
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')

        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'end_date': 'End date must be after start date'
            })

        return attrs


class EntityInputSerializer(serializers.Serializer):
    """Validate vendor/customer create and update payloads."""

    name = serializers.CharField(max_length=200)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)


class ItemSerializer(serializers.Serializer):
    """Line item embedded in a transaction."""

    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3, required=False)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=4, required=False)


class OutstandingBalanceSerializer(serializers.Serializer):
    """Portfolio outstanding balance."""

    outstanding_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
