"""
Report data collection.

Each report type gathers the owner's ledger for a reporting period into
plain dicts and model instances ready for the templates. Nothing here
formats output; see ``rendering`` for that.

Periods (all ending today):
    monthly   - first day of the current month
    quarterly - the same day three months earlier
    yearly    - the day after the same date one year earlier
"""

import logging
from datetime import date, timedelta
from typing import NamedTuple, Optional

from django.db.models import Prefetch
from django.utils import timezone

from apps.customers.models import Customer, CustomerTransaction
from apps.ledger.calculations import ZERO, portfolio_outstanding
from apps.ledger.exceptions import InvalidPeriodError, UnknownReportTypeError
from apps.ledger.guards import require_owner, store_errors
from apps.ledger.periods import add_months, iter_months
from apps.summaries.services import get_monthly_summary
from apps.vendors.models import Vendor, VendorPayment, VendorTransaction

logger = logging.getLogger(__name__)

REPORT_TYPES = ('vendors', 'customers', 'overall', 'vendor_payments')
REPORT_PERIODS = ('monthly', 'quarterly', 'yearly')

REPORT_FILE_NAMES = {
    'vendors': 'Vendor_Transactions',
    'customers': 'Customer_Transactions',
    'overall': 'Overall_Summary',
    'vendor_payments': 'Vendor_Payments',
}


class DateRange(NamedTuple):
    start_date: date
    end_date: date
    label: str


def get_date_range_for_period(period: str, today: Optional[date] = None) -> DateRange:
    """
    Reporting window for ``period``, ending on ``today``.

    Raises:
        InvalidPeriodError: If period is not monthly, quarterly or yearly
    """
    today = today or timezone.localdate()

    if period == 'monthly':
        start = today.replace(day=1)
        label = start.strftime('%B %Y')
    elif period == 'quarterly':
        start = add_months(today, -3)
        label = f"{start:%b} - {today:%b %Y}"
    elif period == 'yearly':
        start = add_months(today, -12) + timedelta(days=1)
        label = f"{start:%b %Y} - {today:%b %Y}"
    else:
        raise InvalidPeriodError(f"Unknown period: {period}. Use monthly, quarterly or yearly")

    return DateRange(start_date=start, end_date=today, label=label)


def _vendor_rows(owner, date_range: DateRange) -> list:
    window = (date_range.start_date, date_range.end_date)
    vendors = Vendor.objects.filter(owner=owner).prefetch_related(
        Prefetch(
            'transactions',
            queryset=VendorTransaction.objects.filter(date__range=window),
            to_attr='report_transactions',
        ),
        Prefetch(
            'payments',
            queryset=VendorPayment.objects.filter(date__range=window),
            to_attr='report_payments',
        ),
    )

    rows = []
    for vendor in vendors:
        purchases = sum((t.total_amount for t in vendor.report_transactions), ZERO)
        paid = sum((p.amount for p in vendor.report_payments), ZERO)
        rows.append({
            'vendor': vendor,
            'transactions': vendor.report_transactions,
            'payments': vendor.report_payments,
            'total_transactions': purchases,
            'total_payments': paid,
            'balance_due': purchases - paid,
        })
    return rows


def _customer_rows(owner, date_range: Optional[DateRange]) -> list:
    """Customers with their sales in the window (all sales when no window)."""
    sales = CustomerTransaction.objects.prefetch_related('payments')
    if date_range is not None:
        sales = sales.filter(date__range=(date_range.start_date, date_range.end_date))
    customers = Customer.objects.filter(owner=owner).prefetch_related(
        Prefetch('transactions', queryset=sales, to_attr='report_transactions')
    )

    rows = []
    for customer in customers:
        payments = sorted(
            (payment for sale in customer.report_transactions for payment in sale.payments.all()),
            key=lambda payment: payment.date,
            reverse=True,
        )
        total_sales = sum((t.total_amount for t in customer.report_transactions), ZERO)
        total_payments = sum((p.amount for p in payments), ZERO)
        rows.append({
            'customer': customer,
            'transactions': customer.report_transactions,
            'payments': payments,
            'total_transactions': total_sales,
            'total_payments': total_payments,
            'balance_due': total_sales - total_payments,
            'total_outstanding': sum((t.outstanding_amount for t in customer.report_transactions), ZERO),
        })
    return rows


def _overall(owner, date_range: DateRange) -> dict:
    period_summaries = [
        get_monthly_summary(owner=owner, year=year, month=month)
        for year, month in iter_months(date_range.start_date, date_range.end_date)
    ]
    total_income = sum((s.monthly_income for s in period_summaries), ZERO)
    total_expenses = sum((s.monthly_expenses for s in period_summaries), ZERO)

    vendors = list(Vendor.objects.filter(owner=owner).with_balances())
    customers = _customer_rows(owner, None)

    return {
        'period_summaries': period_summaries,
        'total_income': total_income,
        'total_expenses': total_expenses,
        'net_balance': total_income - total_expenses,
        'vendors': vendors,
        'customers': customers,
        'total_vendor_outstanding': portfolio_outstanding(v.outstanding for v in vendors),
        'total_customer_outstanding': portfolio_outstanding(c['balance_due'] for c in customers),
    }


@store_errors('fetch_report_data')
def fetch_report_data(*, owner, report_type: str, period: str = 'monthly',
                      today: Optional[date] = None) -> dict:
    """
    Collect the data behind one report.

    Args:
        owner: Acting user
        report_type: vendors, customers, overall or vendor_payments
        period: monthly, quarterly or yearly
        today: Last day of the window (local date by default)

    Returns:
        dict with ``report_type``, ``period``, ``date_range``,
        ``generated_on`` and the report-specific sections

    Raises:
        UnknownReportTypeError: If report_type is not supported
        InvalidPeriodError: If period is not supported
    """
    require_owner(owner)
    if report_type not in REPORT_TYPES:
        raise UnknownReportTypeError(f"Unknown report type: {report_type}")

    today = today or timezone.localdate()
    date_range = get_date_range_for_period(period, today)
    data = {
        'report_type': report_type,
        'period': period,
        'date_range': date_range,
        'generated_on': today,
        'file_name': f"{REPORT_FILE_NAMES[report_type]}_{period}",
    }

    if report_type == 'vendors':
        data['vendors'] = _vendor_rows(owner, date_range)
    elif report_type == 'customers':
        data['customers'] = _customer_rows(owner, date_range)
    elif report_type == 'overall':
        data.update(_overall(owner, date_range))
    else:
        vendors = [row for row in _vendor_rows(owner, date_range) if row['payments']]
        data['vendors'] = vendors
        data['total_payments'] = sum((row['total_payments'] for row in vendors), ZERO)

    logger.info("Collected %s report (%s) for user %s", report_type, period, owner.id)
    return data
