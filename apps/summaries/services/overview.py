"""Dashboard, yearly and history views over the ledger."""

from datetime import date
from typing import Optional

from apps.customers.models import CustomerPayment
from apps.customers.services import get_customer_outstanding_balance
from apps.ledger.calculations import ZERO
from apps.ledger.exceptions import InvalidPeriodError
from apps.ledger.guards import require_owner, store_errors
from apps.ledger.periods import validate_year_month
from apps.vendors.models import VendorTransaction
from apps.vendors.services import get_vendor_outstanding_balance
from .compiler import get_current_monthly_summary, get_monthly_summary


def get_home_summary(*, owner, today: Optional[date] = None) -> dict:
    """
    Figures for the home screen.

    Returns:
        dict: ``vendor_balance`` and ``customer_balance`` (portfolio
        outstanding) plus the current ``monthly_summary``
    """
    require_owner(owner)
    return {
        'vendor_balance': get_vendor_outstanding_balance(owner=owner),
        'customer_balance': get_customer_outstanding_balance(owner=owner),
        'monthly_summary': get_current_monthly_summary(owner=owner, today=today),
    }


def get_yearly_summary(*, owner, year: int) -> dict:
    """
    Income, expenses and net balance for a year with a 12-month breakdown.

    Each month is served from the summary cache, so stale months are
    recompiled on the way.
    """
    require_owner(owner)
    year, _ = validate_year_month(year, 1)

    breakdown = []
    income = expenses = ZERO
    for month in range(1, 13):
        summary = get_monthly_summary(owner=owner, year=year, month=month)
        income += summary.monthly_income
        expenses += summary.monthly_expenses
        breakdown.append({
            'month': month,
            'income': summary.monthly_income,
            'expenses': summary.monthly_expenses,
            'net_balance': summary.monthly_income - summary.monthly_expenses,
        })

    return {
        'year': year,
        'yearly_income': income,
        'yearly_expenses': expenses,
        'yearly_net_balance': income - expenses,
        'monthly_breakdown': breakdown,
    }


@store_errors('get_transaction_history')
def get_transaction_history(*, owner, start_date: date, end_date: date) -> list:
    """
    Money movements in ``[start_date, end_date]``, newest first.

    Vendor transactions are listed as ``expense`` entries and customer
    payments as ``income`` entries; customer sales themselves are not
    money movements and are left out.
    """
    require_owner(owner)
    if start_date > end_date:
        raise InvalidPeriodError("End date must be after start date")

    entries = []

    vendor_transactions = (
        VendorTransaction.objects
        .filter(vendor__owner=owner, date__range=(start_date, end_date))
        .select_related('vendor')
    )
    for vendor_transaction in vendor_transactions:
        entries.append({
            'id': str(vendor_transaction.id),
            'type': 'expense',
            'date': vendor_transaction.date,
            'amount': vendor_transaction.total_amount,
            'entity_id': vendor_transaction.vendor_id,
            'entity_name': vendor_transaction.vendor.name,
            'transaction_id': vendor_transaction.id,
            'payment_for': None,
            'created_at': vendor_transaction.created_at,
        })

    customer_payments = (
        CustomerPayment.objects
        .filter(transaction__customer__owner=owner, date__range=(start_date, end_date))
        .select_related('transaction__customer')
    )
    for payment in customer_payments:
        entries.append({
            'id': str(payment.id),
            'type': 'income',
            'date': payment.date,
            'amount': payment.amount,
            'entity_id': payment.transaction.customer_id,
            'entity_name': payment.transaction.customer.name,
            'transaction_id': payment.transaction_id,
            'payment_for': payment.transaction.date,
            'created_at': payment.created_at,
        })

    entries.sort(key=lambda entry: (entry['date'], entry['created_at']), reverse=True)
    return entries
