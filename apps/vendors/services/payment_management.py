"""Vendor payment service - standalone payments made to vendors."""

import logging
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.ledger.exceptions import LedgerValidationError
from apps.ledger.guards import require_owner, store_errors, validate_payment_amount
from apps.vendors.models import VendorPayment
from .vendor_management import get_vendor

logger = logging.getLogger(__name__)


@store_errors('add_vendor_payment')
@transaction.atomic
def add_vendor_payment(
    *,
    owner,
    vendor_id: Optional[UUID],
    amount,
    date: Optional[date_type],
    payment_method: str = '',
    notes: str = ''
) -> VendorPayment:
    """
    Record a payment made to a vendor.

    This operation:
    1. Validates vendor id, date and amount
    2. Locks the vendor row
    3. Creates the payment with the vendor's current name
    4. Updates the vendor's last payment date/amount

    Returns:
        Created VendorPayment

    Raises:
        LedgerValidationError: If a required field is missing or invalid
        EntityNotFoundError: If vendor doesn't belong to owner
    """
    require_owner(owner)
    if not vendor_id:
        raise LedgerValidationError("Vendor ID is required")
    if not date:
        raise LedgerValidationError("Payment date is required")
    amount = validate_payment_amount(amount)

    vendor = get_vendor(owner=owner, vendor_id=vendor_id, for_update=True)
    payment = VendorPayment.objects.create(
        owner=owner,
        vendor=vendor,
        vendor_name=vendor.name,
        date=date,
        amount=amount,
        payment_method=payment_method or '',
        notes=notes or '',
    )
    vendor.record_payment(payment)

    logger.info("Vendor payment %s of %s to vendor %s", payment.id, amount, vendor.id)
    return payment

def get_vendor_payments(*, owner, vendor_id: UUID) -> QuerySet:
    """Payments made to one vendor, newest first."""
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    return VendorPayment.objects.filter(owner=owner, vendor=vendor).order_by('-date', '-created_at')

def get_all_vendor_payments(
    *,
    owner,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None
) -> QuerySet:
    """All of the owner's vendor payments, newest first, optionally date-bounded."""
    require_owner(owner)
    queryset = VendorPayment.objects.filter(owner=owner).select_related('vendor')
    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lte=end_date)
    return queryset.order_by('-date', '-created_at')
