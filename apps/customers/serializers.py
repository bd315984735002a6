from rest_framework import serializers
from apps.ledger.serializers import ItemSerializer
from .models import Customer, CustomerTransaction, CustomerPayment

# =============================================================================
# Input Serializers
# =============================================================================


class CustomerPaymentInputSerializer(serializers.Serializer):
    """Validate a payment received from a customer. ``date`` defaults to today."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField(required=False, allow_null=True)
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class CustomerTransactionInputSerializer(serializers.Serializer):
    """
    Validate customer transaction create/patch payload.

    ``payments`` on create are the payments already received with the sale;
    on patch they replace the stored payments.
    """

    date = serializers.DateField()
    items = ItemSerializer(many=True, required=False)
    material_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    payments = CustomerPaymentInputSerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================


class CustomerSerializer(serializers.ModelSerializer):
    """Customer with live balance figures (when annotated)."""

    transactions_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    payments_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Customer
        fields = [
            'id',
            'name',
            'phone',
            'address',
            'transactions_total',
            'payments_total',
            'outstanding',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CustomerPaymentSerializer(serializers.ModelSerializer):

    class Meta:
        model = CustomerPayment
        fields = ['id', 'date', 'amount', 'payment_method', 'notes', 'created_at']
        read_only_fields = fields


class CustomerTransactionSerializer(serializers.ModelSerializer):
    """Customer transaction with its payments."""

    customer_name = serializers.CharField(source='customer.name', read_only=True)
    payments = CustomerPaymentSerializer(many=True, read_only=True)

    class Meta:
        model = CustomerTransaction
        fields = [
            'id',
            'customer',
            'customer_name',
            'date',
            'items',
            'material_amount',
            'total_amount',
            'total_payments',
            'outstanding_amount',
            'payments',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CustomerBalanceSerializer(serializers.Serializer):
    """Outstanding balance of one customer."""

    customer_id = serializers.UUIDField()
    outstanding_balance = serializers.DecimalField(max_digits=14, decimal_places=2)
