from rest_framework import serializers
from apps.ledger.serializers import ItemSerializer
from .models import Vendor, VendorTransaction, VendorPayment

# =============================================================================
# Input Serializers
# =============================================================================

class VendorTransactionInputSerializer(serializers.Serializer):
    """
    Validate vendor transaction create/patch payload.

    Amount fields are optional: without ``material_amount`` the material is
    the items subtotal, and ``transport_charge`` defaults to 0.
    """

    date = serializers.DateField()
    items = ItemSerializer(many=True, required=False)
    material_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    transport_charge = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True)

class VendorPaymentInputSerializer(serializers.Serializer):
    """Validate a payment made to a vendor."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    date = serializers.DateField()
    payment_method = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

# =============================================================================
# Output Serializers
# =============================================================================

class VendorSerializer(serializers.ModelSerializer):
    """Vendor with live balance figures (when annotated)."""

    transactions_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    payments_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    outstanding = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Vendor
        fields = [
            'id',
            'name',
            'phone',
            'address',
            'transactions_total',
            'payments_total',
            'outstanding',
            'total_spent',
            'total_paid',
            'remaining_balance',
            'last_payment_date',
            'last_payment_amount',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

class VendorTransactionSerializer(serializers.ModelSerializer):
    """Vendor transaction detail."""

    vendor_name = serializers.CharField(source='vendor.name', read_only=True)

    class Meta:
        model = VendorTransaction
        fields = [
            'id',
            'vendor',
            'vendor_name',
            'date',
            'items',
            'material_amount',
            'transport_charge',
            'total_amount',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

class VendorPaymentSerializer(serializers.ModelSerializer):
    """Standalone vendor payment."""

    class Meta:
        model = VendorPayment
        fields = [
            'id',
            'vendor',
            'vendor_name',
            'date',
            'amount',
            'payment_method',
            'notes',
            'created_at',
        ]
        read_only_fields = fields

class VendorBalanceSerializer(serializers.Serializer):
    """Balance snapshot of one vendor."""

    vendor_id = serializers.UUIDField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_paid = serializers.DecimalField(max_digits=14, decimal_places=2)
    remaining_balance = serializers.DecimalField(max_digits=14, decimal_places=2)

