from django.conf import settings
from django.db import models
from decimal import Decimal
import uuid


class MonthlySummary(models.Model):
    """
    Cached monthly figures for one owner.

    A row is a pure function of the owner's transactions and payments for
    the month. Writes touching the month flip ``is_stale``; the next read
    recompiles the row in full.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='monthly_summaries'
    )
    year = models.PositiveSmallIntegerField()
    month = models.PositiveSmallIntegerField()

    monthly_income = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    monthly_expenses = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    net_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))

    vendor_transaction_count = models.PositiveIntegerField(default=0)
    customer_transaction_count = models.PositiveIntegerField(default=0)
    vendor_payment_count = models.PositiveIntegerField(default=0)
    customer_payment_count = models.PositiveIntegerField(default=0)

    # [{"id": ..., "name": ..., "amount": "300.00"}], highest first
    top_vendors = models.JSONField(default=list, blank=True)
    top_customers = models.JSONField(default=list, blank=True)

    is_stale = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'monthly_summaries'
        ordering = ['-year', '-month']
        constraints = [
            models.UniqueConstraint(
                fields=['owner', 'year', 'month'],
                name='unique_owner_month_summary'
            ),
        ]

    def __str__(self):
        return f"{self.owner} - {self.key}"

    @property
    def key(self):
        """Year-month key, e.g. ``2025_03``."""
        return f"{self.year}_{self.month:02d}"
