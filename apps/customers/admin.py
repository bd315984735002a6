from django.contrib import admin
from .models import Customer, CustomerTransaction, CustomerPayment


class CustomerPaymentInline(admin.TabularInline):
    model = CustomerPayment
    extra = 0
    fields = ['date', 'amount', 'payment_method', 'notes']
    ordering = ['-date']


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'phone', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'owner__email', 'phone']
    ordering = ['name_lower']
    readonly_fields = ['name_lower', 'created_at', 'updated_at']


@admin.register(CustomerTransaction)
class CustomerTransactionAdmin(admin.ModelAdmin):
    """
    Admin interface for customer sales.

    Payment totals are derived; edit payments through the API so the
    transaction's outstanding amount stays in step.
    """

    list_display = ['customer', 'date', 'total_amount', 'total_payments', 'outstanding_amount']
    list_filter = ['date']
    search_fields = ['customer__name', 'customer__owner__email', 'notes']
    date_hierarchy = 'date'
    ordering = ['-date']
    raw_id_fields = ['customer']
    readonly_fields = ['total_payments', 'outstanding_amount', 'created_at', 'updated_at']
    inlines = [CustomerPaymentInline]
