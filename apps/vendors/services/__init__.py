"""Services for vendors business logic."""

from .vendor_management import (
    create_vendor,
    get_vendor,
    update_vendor,
    delete_vendor,
    list_vendors,
    search_vendors,
)
from .transaction_management import (
    add_vendor_transaction,
    get_vendor_transaction,
    get_vendor_transactions,
    update_vendor_transaction,
    delete_vendor_transaction,
)
from .payment_management import (
    add_vendor_payment,
    get_vendor_payments,
    get_all_vendor_payments,
)
from .balances import (
    get_single_vendor_outstanding_balance,
    get_vendor_outstanding_balance,
    get_vendor_remaining_balance,
)

__all__ = [
    # Vendors
    'create_vendor',
    'get_vendor',
    'update_vendor',
    'delete_vendor',
    'list_vendors',
    'search_vendors',
    # Transactions
    'add_vendor_transaction',
    'get_vendor_transaction',
    'get_vendor_transactions',
    'update_vendor_transaction',
    'delete_vendor_transaction',
    # Payments
    'add_vendor_payment',
    'get_vendor_payments',
    'get_all_vendor_payments',
    # Balances
    'get_single_vendor_outstanding_balance',
    'get_vendor_outstanding_balance',
    'get_vendor_remaining_balance',
]
