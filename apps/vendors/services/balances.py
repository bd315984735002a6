"""
Vendor balance service.

Balances are what the owner still has to pay: the sum of transaction
totals minus the sum of standalone payments. All sums run in the database
(``Sum`` aggregates and correlated subqueries), so a balance read costs a
fixed number of queries regardless of how many rows a vendor has.

Floor policy:
    - Single vendor: reported unclamped (an overpaid vendor is negative)
    - Portfolio: each vendor contributes ``max(0, balance)``
"""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.ledger.aggregates import money_sum
from apps.ledger.calculations import outstanding_amount, portfolio_outstanding
from apps.ledger.guards import require_owner, store_errors
from apps.vendors.models import Vendor, VendorPayment, VendorTransaction
from .vendor_management import get_vendor

logger = logging.getLogger(__name__)


def _vendor_totals(vendor):
    spent = VendorTransaction.objects.filter(vendor=vendor).aggregate(
        total=money_sum('total_amount')
    )['total']
    paid = VendorPayment.objects.filter(vendor=vendor).aggregate(
        total=money_sum('amount')
    )['total']
    return spent, paid


@store_errors('get_single_vendor_outstanding_balance')
def get_single_vendor_outstanding_balance(*, owner, vendor_id: UUID) -> Decimal:
    """
    Outstanding balance of one vendor, not clamped.

    Raises:
        EntityNotFoundError: If vendor doesn't belong to owner
    """
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    spent, paid = _vendor_totals(vendor)
    return outstanding_amount(spent, paid)


@store_errors('get_vendor_outstanding_balance')
def get_vendor_outstanding_balance(*, owner) -> Decimal:
    """Portfolio balance over all of the owner's vendors, never negative."""
    require_owner(owner)
    balances = (
        Vendor.objects
        .filter(owner=owner)
        .with_balances()
        .values_list('outstanding', flat=True)
    )
    return portfolio_outstanding(balances)


@store_errors('get_vendor_remaining_balance')
@transaction.atomic
def get_vendor_remaining_balance(*, owner, vendor_id: UUID) -> dict:
    """
    Recompute a vendor's balance and store it on the vendor.

    The vendor row is locked for the read-compute-write sequence, so a
    payment recorded concurrently (which also locks the vendor) lands
    either fully before or fully after the snapshot.

    Returns:
        {
            'vendor_id': UUID,
            'total_spent': Decimal,
            'total_paid': Decimal,
            'remaining_balance': Decimal,  # unclamped
        }
    """
    vendor = get_vendor(owner=owner, vendor_id=vendor_id, for_update=True)
    spent, paid = _vendor_totals(vendor)
    vendor.record_balance(spent, paid)

    logger.debug("Vendor %s balance snapshot: spent=%s paid=%s", vendor.id, spent, paid)
    return {
        'vendor_id': vendor.id,
        'total_spent': vendor.total_spent,
        'total_paid': vendor.total_paid,
        'remaining_balance': vendor.remaining_balance,
    }
