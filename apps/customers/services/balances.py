"""
Customer balance service.

Outstanding for a customer is what they still owe: transaction totals
minus payments received. The single-customer figure is unclamped; the
portfolio figure floors each customer at zero, the same rule vendors use.
"""

from decimal import Decimal
from uuid import UUID

from apps.customers.models import Customer, CustomerPayment, CustomerTransaction
from apps.ledger.aggregates import money_sum
from apps.ledger.calculations import outstanding_amount, portfolio_outstanding
from apps.ledger.guards import require_owner, store_errors
from .customer_management import get_customer


@store_errors('get_single_customer_outstanding_balance')
def get_single_customer_outstanding_balance(*, owner, customer_id: UUID) -> Decimal:
    """Sum of transaction outstanding amounts for one customer, not clamped."""
    customer = get_customer(owner=owner, customer_id=customer_id)
    billed = CustomerTransaction.objects.filter(customer=customer).aggregate(
        total=money_sum('total_amount')
    )['total']
    received = CustomerPayment.objects.filter(transaction__customer=customer).aggregate(
        total=money_sum('amount')
    )['total']
    return outstanding_amount(billed, received)


@store_errors('get_customer_outstanding_balance')
def get_customer_outstanding_balance(*, owner) -> Decimal:
    """Portfolio balance over all of the owner's customers, never negative."""
    require_owner(owner)
    balances = (
        Customer.objects
        .filter(owner=owner)
        .with_balances()
        .values_list('outstanding', flat=True)
    )
    return portfolio_outstanding(balances)
