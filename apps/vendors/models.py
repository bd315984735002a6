from django.conf import settings
from django.db import models
from django.db.models import ExpressionWrapper, F, OuterRef
from decimal import Decimal

from apps.ledger.aggregates import MONEY, sum_subquery
from apps.ledger.models import LedgerEntity, LedgerTransaction, LedgerPayment


class VendorQuerySet(models.QuerySet):

    def with_balances(self):
        """
        Annotate live balance figures computed in the database.

        Adds ``transactions_total``, ``payments_total`` and the unclamped
        ``outstanding``.
        """
        transactions = VendorTransaction.objects.filter(vendor=OuterRef('pk'))
        payments = VendorPayment.objects.filter(vendor=OuterRef('pk'))
        return self.annotate(
            transactions_total=sum_subquery(transactions, 'total_amount', 'vendor'),
            payments_total=sum_subquery(payments, 'amount', 'vendor'),
        ).annotate(
            outstanding=ExpressionWrapper(
                F('transactions_total') - F('payments_total'),
                output_field=MONEY
            )
        )


class Vendor(LedgerEntity):
    """
    Supplier the user buys material from.

    The balance fields are a denormalized snapshot written back by
    ``get_vendor_remaining_balance``; balance queries always recompute from
    transactions and payments.
    """

    total_spent = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    total_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    remaining_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    last_payment_date = models.DateField(null=True, blank=True)
    last_payment_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True
    )

    objects = VendorQuerySet.as_manager()

    class Meta(LedgerEntity.Meta):
        db_table = 'vendors'
        indexes = [
            models.Index(fields=['owner', 'name_lower'], name='vendor_owner_name_idx'),
        ]

    def record_balance(self, total_spent, total_paid):
        """Store a balance snapshot."""
        self.total_spent = total_spent
        self.total_paid = total_paid
        self.remaining_balance = total_spent - total_paid
        self.save(update_fields=['total_spent', 'total_paid', 'remaining_balance', 'updated_at'])

    def record_payment(self, payment):
        """Denormalize the most recent payment onto the vendor."""
        self.last_payment_date = payment.date
        self.last_payment_amount = payment.amount
        self.save(update_fields=['last_payment_date', 'last_payment_amount', 'updated_at'])


class VendorTransaction(LedgerTransaction):
    """Purchase from a vendor: material plus optional transport charge."""

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    transport_charge = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )

    class Meta(LedgerTransaction.Meta):
        db_table = 'vendor_transactions'
        indexes = [
            models.Index(fields=['vendor', 'date'], name='vtx_vendor_date_idx'),
            models.Index(fields=['date'], name='vtx_date_idx'),
        ]

    def __str__(self):
        return f"{self.vendor.name} - {self.date} - {self.total_amount}"


class VendorPayment(LedgerPayment):
    """Standalone payment made to a vendor."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='vendor_payments'
    )
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    # Copied from the vendor at payment time
    vendor_name = models.CharField(max_length=200, blank=True)

    class Meta(LedgerPayment.Meta):
        db_table = 'vendor_payments'
        indexes = [
            models.Index(fields=['owner', 'date'], name='vpay_owner_date_idx'),
            models.Index(fields=['vendor', 'date'], name='vpay_vendor_date_idx'),
        ]

    def __str__(self):
        return f"{self.vendor_name} - {self.date} - {self.amount}"
