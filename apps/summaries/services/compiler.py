"""
Monthly summary compiler.

``compile_monthly_summary`` is a pure read: it aggregates one calendar
month of the owner's ledger in the database and returns plain values.
``calculate_monthly_summary`` persists that result as the cached
``MonthlySummary`` row, and ``get_monthly_summary`` serves the cached row,
recompiling it first when it is missing or stale.

Counting rules:
    - expenses are vendor transaction totals dated in the month
    - income is customer payments dated in the month, whatever the date
      of the sale they belong to
    - standalone vendor payments and customer sales are only counted
"""

import logging
from datetime import date
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from apps.customers.models import CustomerPayment, CustomerTransaction
from apps.ledger.aggregates import money_sum
from apps.ledger.calculations import to_money
from apps.ledger.guards import require_owner, store_errors
from apps.ledger.periods import month_window
from apps.summaries.models import MonthlySummary
from apps.vendors.models import VendorPayment, VendorTransaction

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = (
    'monthly_income',
    'monthly_expenses',
    'net_balance',
    'vendor_transaction_count',
    'customer_transaction_count',
    'vendor_payment_count',
    'customer_payment_count',
    'top_vendors',
    'top_customers',
)


def _top_entities(rows, limit: int) -> list:
    """
    Leaderboard of entities with a positive subtotal, highest first.

    ``rows`` arrive in entity creation order; the sort is stable so equal
    amounts keep that order.
    """
    ranked = sorted(
        (row for row in rows if row['amount'] > 0),
        key=lambda row: row['amount'],
        reverse=True,
    )
    return [
        {'id': str(row['id']), 'name': row['name'], 'amount': str(to_money(row['amount']))}
        for row in ranked[:limit]
    ]


def compile_monthly_summary(*, owner, year: int, month: int) -> dict:
    """
    Aggregate one month of the owner's ledger.

    Args:
        owner: Acting user
        year: Calendar year
        month: Calendar month (1-12)

    Returns:
        dict with income, expenses, net balance, the four counters and
        the top vendor/customer leaderboards

    Raises:
        NotAuthenticatedError: If no owner is given
        InvalidPeriodError: If the month is out of range
    """
    require_owner(owner)
    first_day, last_day = month_window(year, month)
    limit = getattr(settings, 'LEDGER_TOP_ENTITIES', 3)

    vendor_transactions = VendorTransaction.objects.filter(
        vendor__owner=owner,
        date__range=(first_day, last_day),
    )
    expenses = vendor_transactions.aggregate(
        total=money_sum('total_amount'),
        count=Count('id'),
    )
    vendor_rows = (
        vendor_transactions
        .values('vendor_id', 'vendor__name', 'vendor__created_at')
        .annotate(amount=money_sum('total_amount'))
        .order_by('vendor__created_at', 'vendor_id')
    )

    customer_payments = CustomerPayment.objects.filter(
        transaction__customer__owner=owner,
        date__range=(first_day, last_day),
    )
    income = customer_payments.aggregate(
        total=money_sum('amount'),
        count=Count('id'),
    )
    customer_rows = (
        customer_payments
        .values(
            'transaction__customer_id',
            'transaction__customer__name',
            'transaction__customer__created_at',
        )
        .annotate(amount=money_sum('amount'))
        .order_by('transaction__customer__created_at', 'transaction__customer_id')
    )

    monthly_income = to_money(income['total'])
    monthly_expenses = to_money(expenses['total'])

    return {
        'year': first_day.year,
        'month': first_day.month,
        'monthly_income': monthly_income,
        'monthly_expenses': monthly_expenses,
        'net_balance': monthly_income - monthly_expenses,
        'vendor_transaction_count': expenses['count'],
        'customer_transaction_count': CustomerTransaction.objects.filter(
            customer__owner=owner,
            date__range=(first_day, last_day),
        ).count(),
        'vendor_payment_count': VendorPayment.objects.filter(
            owner=owner,
            date__range=(first_day, last_day),
        ).count(),
        'customer_payment_count': income['count'],
        'top_vendors': _top_entities(
            [
                {'id': row['vendor_id'], 'name': row['vendor__name'], 'amount': row['amount']}
                for row in vendor_rows
            ],
            limit,
        ),
        'top_customers': _top_entities(
            [
                {
                    'id': row['transaction__customer_id'],
                    'name': row['transaction__customer__name'],
                    'amount': row['amount'],
                }
                for row in customer_rows
            ],
            limit,
        ),
    }


@store_errors('calculate_monthly_summary')
@transaction.atomic
def calculate_monthly_summary(*, owner, year: int, month: int) -> MonthlySummary:
    """
    Recompile a month and overwrite its cached row.

    The row is rebuilt in full from a fresh aggregation, so running this
    repeatedly on unchanged data stores the same figures every time.
    """
    data = compile_monthly_summary(owner=owner, year=year, month=month)
    defaults = {field: data[field] for field in SUMMARY_FIELDS}
    defaults['is_stale'] = False

    summary, created = MonthlySummary.objects.update_or_create(
        owner=owner,
        year=data['year'],
        month=data['month'],
        defaults=defaults,
    )
    logger.info(
        "%s monthly summary %s for user %s",
        "Created" if created else "Recalculated", summary.key, owner.id
    )
    return summary


@store_errors('get_monthly_summary')
def get_monthly_summary(*, owner, year: int, month: int) -> MonthlySummary:
    """
    Cached summary for a month, recompiled when missing or stale.

    A month without any activity yields a row with all counters at zero.
    """
    require_owner(owner)
    first_day, _ = month_window(year, month)

    summary = MonthlySummary.objects.filter(
        owner=owner,
        year=first_day.year,
        month=first_day.month,
    ).first()
    if summary is not None and not summary.is_stale:
        return summary
    return calculate_monthly_summary(owner=owner, year=first_day.year, month=first_day.month)


def get_current_monthly_summary(*, owner, today: Optional[date] = None) -> MonthlySummary:
    """Summary of the month containing ``today`` (local date by default)."""
    today = today or timezone.localdate()
    return get_monthly_summary(owner=owner, year=today.year, month=today.month)
