"""
Data reset service.

Wipes the owner's ledger, either one collection at a time or everything.
Deleting vendors and customers cascades to their transactions and
payments.
"""

import logging

from django.db import transaction

from apps.customers.models import Customer
from apps.ledger.exceptions import LedgerValidationError
from apps.ledger.guards import require_owner, store_errors
from apps.summaries.models import MonthlySummary
from apps.vendors.models import Vendor, VendorPayment

logger = logging.getLogger(__name__)

# Deletion order for a full reset
RESET_COLLECTIONS = {
    'vendors': Vendor,
    'customers': Customer,
    'vendor_payments': VendorPayment,
    'summaries': MonthlySummary,
}


def _delete(owner, collection: str) -> int:
    try:
        model = RESET_COLLECTIONS[collection]
    except KeyError:
        raise LedgerValidationError(f"Unknown collection: {collection}")

    deleted, _ = model.objects.filter(owner=owner).delete()
    return deleted


@store_errors('reset_collection_data')
@transaction.atomic
def reset_collection_data(*, owner, collection: str) -> int:
    """
    Delete one collection of the owner's data.

    Args:
        owner: Acting user
        collection: vendors, customers, vendor_payments or summaries

    Returns:
        Number of deleted rows, cascaded children included

    Raises:
        LedgerValidationError: If the collection is unknown
    """
    require_owner(owner)
    deleted = _delete(owner, collection)
    logger.info("Reset %s for user %s: %d rows deleted", collection, owner.id, deleted)
    return deleted


@store_errors('reset_all_data')
@transaction.atomic
def reset_all_data(*, owner) -> dict:
    """
    Delete all of the owner's ledger data in one transaction.

    Returns:
        dict: rows deleted per collection
    """
    require_owner(owner)
    counts = {collection: _delete(owner, collection) for collection in RESET_COLLECTIONS}
    logger.info("Reset all data for user %s: %s", owner.id, counts)
    return counts
