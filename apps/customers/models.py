from django.db import models
from django.db.models import ExpressionWrapper, F, OuterRef
from decimal import Decimal

from apps.ledger.aggregates import MONEY, money_sum, sum_subquery
from apps.ledger.models import LedgerEntity, LedgerTransaction, LedgerPayment


class CustomerQuerySet(models.QuerySet):

    def with_balances(self):
        """Annotate ``transactions_total``, ``payments_total`` and ``outstanding``."""
        transactions = CustomerTransaction.objects.filter(customer=OuterRef('pk'))
        payments = CustomerPayment.objects.filter(transaction__customer=OuterRef('pk'))
        return self.annotate(
            transactions_total=sum_subquery(transactions, 'total_amount', 'customer'),
            payments_total=sum_subquery(payments, 'amount', 'transaction__customer'),
        ).annotate(
            outstanding=ExpressionWrapper(
                F('transactions_total') - F('payments_total'),
                output_field=MONEY
            )
        )


class Customer(LedgerEntity):
    """Buyer the user sells material to."""

    objects = CustomerQuerySet.as_manager()

    class Meta(LedgerEntity.Meta):
        db_table = 'customers'
        indexes = [
            models.Index(fields=['owner', 'name_lower'], name='customer_owner_name_idx'),
        ]


class CustomerTransaction(LedgerTransaction):
    """
    Sale to a customer.

    ``total_payments`` and ``outstanding_amount`` mirror the payments
    attached to the transaction and are refreshed by
    ``update_payment_totals`` whenever payments change.
    """

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    total_payments = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    # Not clamped: an overpaid sale goes negative
    outstanding_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )

    class Meta(LedgerTransaction.Meta):
        db_table = 'customer_transactions'
        indexes = [
            models.Index(fields=['customer', 'date'], name='ctx_customer_date_idx'),
            models.Index(fields=['date'], name='ctx_date_idx'),
        ]

    def __str__(self):
        return f"{self.customer.name} - {self.date} - {self.total_amount}"

    def update_payment_totals(self):
        """Recalculate payment totals from attached payments."""
        self.total_payments = self.payments.aggregate(
            total=money_sum('amount')
        )['total']
        self.outstanding_amount = self.total_amount - self.total_payments
        self.save(update_fields=['total_payments', 'outstanding_amount', 'updated_at'])


class CustomerPayment(LedgerPayment):
    """Payment received against a customer transaction."""

    transaction = models.ForeignKey(
        CustomerTransaction,
        on_delete=models.CASCADE,
        related_name='payments'
    )

    class Meta(LedgerPayment.Meta):
        db_table = 'customer_payments'
        indexes = [
            models.Index(fields=['transaction', 'date'], name='cpay_tx_date_idx'),
            models.Index(fields=['date'], name='cpay_date_idx'),
        ]

    def __str__(self):
        return f"{self.transaction_id} - {self.date} - {self.amount}"
