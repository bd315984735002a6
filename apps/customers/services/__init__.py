"""Services for customers business logic."""

from .customer_management import (
    create_customer,
    get_customer,
    update_customer,
    delete_customer,
    list_customers,
    search_customers,
)
from .transaction_management import (
    add_customer_transaction,
    get_customer_transaction,
    get_customer_transactions,
    update_customer_transaction,
    delete_customer_transaction,
    add_payment_to_transaction,
)
from .balances import (
    get_single_customer_outstanding_balance,
    get_customer_outstanding_balance,
)

__all__ = [
    # Customers
    'create_customer',
    'get_customer',
    'update_customer',
    'delete_customer',
    'list_customers',
    'search_customers',
    # Transactions & payments
    'add_customer_transaction',
    'get_customer_transaction',
    'get_customer_transactions',
    'update_customer_transaction',
    'delete_customer_transaction',
    'add_payment_to_transaction',
    # Balances
    'get_single_customer_outstanding_balance',
    'get_customer_outstanding_balance',
]
