"""Vendor transaction service - purchases recorded against a vendor."""

import logging
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet

from apps.ledger.calculations import (
    apply_vendor_patch,
    calculate_vendor_totals,
    normalize_items,
    to_money,
)
from apps.ledger.exceptions import LedgerValidationError, TransactionNotFoundError
from apps.ledger.guards import store_errors, validate_stored_amounts
from apps.vendors.models import VendorTransaction
from .vendor_management import get_vendor

logger = logging.getLogger(__name__)


@store_errors('add_vendor_transaction')
@transaction.atomic
def add_vendor_transaction(
    *,
    owner,
    vendor_id: UUID,
    date: date_type,
    items: Optional[list] = None,
    material_amount=None,
    transport_charge=None,
    notes: str = ''
) -> VendorTransaction:
    """
    Record a purchase from a vendor.

    Totals are derived here, never taken from the client:
    ``material_amount`` is the override when supplied, otherwise the sum of
    ``quantity * unit_price`` over ``items``; ``total_amount`` adds the
    transport charge (0 when omitted).

    Args:
        owner: Acting user
        vendor_id: Vendor UUID
        date: Purchase date
        items: Line items ``[{name, quantity, unit_price}]``
        material_amount: Optional manual material amount
        transport_charge: Optional transport surcharge
        notes: Free text

    Returns:
        Created VendorTransaction

    Raises:
        EntityNotFoundError: If vendor doesn't belong to owner
        LedgerValidationError: If date is missing or an amount is too large
    """
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    if not date:
        raise LedgerValidationError("Transaction date is required")

    totals = calculate_vendor_totals(items, material_amount, transport_charge)
    validate_stored_amounts(
        material_amount=totals.material_amount,
        transport_charge=to_money(transport_charge),
        total_amount=totals.total_amount,
    )
    vendor_transaction = VendorTransaction.objects.create(
        vendor=vendor,
        date=date,
        items=normalize_items(items),
        material_amount=totals.material_amount,
        transport_charge=to_money(transport_charge),
        total_amount=totals.total_amount,
        notes=notes or '',
    )
    logger.debug(
        "Vendor transaction %s: material=%s total=%s",
        vendor_transaction.id, totals.material_amount, totals.total_amount
    )
    return vendor_transaction


def get_vendor_transaction(*, owner, vendor_id: UUID, transaction_id: UUID,
                           for_update: bool = False) -> VendorTransaction:
    """
    Fetch a single transaction of the owner's vendor.

    Raises:
        EntityNotFoundError: If vendor not found
        TransactionNotFoundError: If transaction not found for that vendor
    """
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    queryset = VendorTransaction.objects.filter(vendor=vendor)
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=transaction_id)
    except (VendorTransaction.DoesNotExist, DjangoValidationError):
        raise TransactionNotFoundError("Transaction not found")


def get_vendor_transactions(
    *,
    owner,
    vendor_id: UUID,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None
) -> QuerySet:
    """Vendor transactions, newest first, optionally inside a date window."""
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    queryset = VendorTransaction.objects.filter(vendor=vendor).select_related('vendor')
    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lte=end_date)
    return queryset.order_by('-date', '-created_at')


@store_errors('update_vendor_transaction')
@transaction.atomic
def update_vendor_transaction(*, owner, vendor_id: UUID, transaction_id: UUID,
                              data: dict) -> VendorTransaction:
    """
    Apply a partial update to a vendor transaction.

    Amounts are recomputed only from what ``data`` carries: new ``items``
    recompute the material amount (unless an explicit override is also
    given), and ``total_amount`` follows whenever material or transport
    changed. Untouched amounts keep their stored values.
    """
    vendor_transaction = get_vendor_transaction(
        owner=owner,
        vendor_id=vendor_id,
        transaction_id=transaction_id,
        for_update=True,
    )

    if 'date' in data:
        if not data['date']:
            raise LedgerValidationError("Transaction date is required")
        vendor_transaction.date = data['date']
    if 'items' in data:
        vendor_transaction.items = normalize_items(data['items'])
    if 'notes' in data:
        vendor_transaction.notes = data['notes'] or ''

    updates = apply_vendor_patch(
        data,
        current_material=vendor_transaction.material_amount,
        current_transport=vendor_transaction.transport_charge,
    )
    validate_stored_amounts(**updates)
    for field, value in updates.items():
        setattr(vendor_transaction, field, value)

    vendor_transaction.save()
    return vendor_transaction


@store_errors('delete_vendor_transaction')
@transaction.atomic
def delete_vendor_transaction(*, owner, vendor_id: UUID, transaction_id: UUID) -> None:
    """Delete a vendor transaction."""
    vendor_transaction = get_vendor_transaction(
        owner=owner,
        vendor_id=vendor_id,
        transaction_id=transaction_id,
    )
    vendor_transaction.delete()
