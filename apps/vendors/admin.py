# ==========================================
# apps/vendors/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Vendor, VendorTransaction, VendorPayment


class VendorTransactionInline(admin.TabularInline):
    """Inline admin for transactions within a vendor."""
    model = VendorTransaction
    extra = 0
    fields = ['date', 'material_amount', 'transport_charge', 'total_amount', 'notes']
    readonly_fields = ['material_amount', 'transport_charge', 'total_amount']
    ordering = ['-date']

    def has_add_permission(self, request, obj=None):
        """Transactions are created through the API so totals stay derived."""
        return False


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    """
    Admin interface for vendors.

    Shows the stored balance snapshot; the live balance is computed by the
    balance service.
    """

    list_display = [
        'name',
        'owner',
        'phone',
        'balance_badge',
        'last_payment_date',
        'created_at',
    ]
    list_filter = ['created_at', 'last_payment_date']
    search_fields = ['name', 'owner__email', 'phone']
    ordering = ['name_lower']
    readonly_fields = [
        'name_lower',
        'total_spent',
        'total_paid',
        'remaining_balance',
        'last_payment_date',
        'last_payment_amount',
        'created_at',
        'updated_at',
    ]
    inlines = [VendorTransactionInline]

    def balance_badge(self, obj):
        """Display stored remaining balance as colored badge."""
        color = '#B85C5C' if obj.remaining_balance > 0 else '#6B8E5E'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color, obj.remaining_balance
        )
    balance_badge.short_description = 'Balance'
    balance_badge.admin_order_field = 'remaining_balance'


@admin.register(VendorPayment)
class VendorPaymentAdmin(admin.ModelAdmin):
    """Admin interface for vendor payments."""

    list_display = ['vendor_name', 'owner', 'date', 'amount', 'payment_method']
    list_filter = ['date', 'payment_method']
    search_fields = ['vendor_name', 'owner__email', 'notes']
    date_hierarchy = 'date'
    ordering = ['-date']
    raw_id_fields = ['vendor', 'owner']
