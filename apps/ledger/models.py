from django.conf import settings
from django.db import models
from decimal import Decimal
import uuid


class LedgerEntity(models.Model):
    """Abstract base for vendors and customers (per-user records)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='%(class)ss'
    )

    name = models.CharField(max_length=200)
    # Lowercase copy maintained for prefix search
    name_lower = models.CharField(max_length=200, editable=False, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['name_lower', 'created_at']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        """Keep ``name_lower`` in sync with ``name``."""
        self.name_lower = (self.name or '').lower()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'name' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'name_lower'}
        super().save(*args, **kwargs)


class LedgerTransaction(models.Model):
    """Abstract base for vendor and customer transactions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField()

    # Embedded line items: [{"name", "quantity", "unit_price"}]
    items = models.JSONField(default=list, blank=True)

    material_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    notes = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']


class LedgerPayment(models.Model):
    """Abstract base for payment records."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField()
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_method = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-date', '-created_at']
