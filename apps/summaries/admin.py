from django.contrib import admin
from .models import MonthlySummary


@admin.register(MonthlySummary)
class MonthlySummaryAdmin(admin.ModelAdmin):
    """Cached summaries are derived data; they are shown read-only."""

    list_display = ['owner', 'year', 'month', 'monthly_income', 'monthly_expenses', 'net_balance', 'is_stale']
    list_filter = ['year', 'month', 'is_stale']
    search_fields = ['owner__email']
    ordering = ['-year', '-month']
    readonly_fields = [field.name for field in MonthlySummary._meta.fields]

    def has_add_permission(self, request):
        return False
