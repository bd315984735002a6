"""Vendor management service - CRUD and search for vendors."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet
from uuid import UUID

from apps.ledger.exceptions import EntityNotFoundError, LedgerValidationError
from apps.ledger.guards import require_owner, store_errors
from apps.vendors.models import Vendor

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'phone', 'address')


def _clean_name(name) -> str:
    name = (name or '').strip()
    if not name:
        raise LedgerValidationError("Vendor name is required")
    return name


def get_vendor(*, owner, vendor_id: UUID, for_update: bool = False) -> Vendor:
    """
    Fetch one of the owner's vendors.

    Raises:
        NotAuthenticatedError: If no owner is given
        EntityNotFoundError: If the vendor doesn't exist or belongs to someone else
    """
    require_owner(owner)
    queryset = Vendor.objects.filter(owner=owner)
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=vendor_id)
    except (Vendor.DoesNotExist, DjangoValidationError):
        raise EntityNotFoundError("Vendor not found")


@store_errors('create_vendor')
def create_vendor(*, owner, name: str, phone: str = '', address: str = '') -> Vendor:
    """
    Create a vendor for the owner.

    Args:
        owner: Acting user
        name: Display name (required, stripped)
        phone: Optional phone number
        address: Optional postal address

    Returns:
        Created Vendor instance

    Raises:
        LedgerValidationError: If name is blank
    """
    require_owner(owner)
    vendor = Vendor.objects.create(
        owner=owner,
        name=_clean_name(name),
        phone=phone or '',
        address=address or '',
    )
    logger.info("Created vendor %s for user %s", vendor.id, owner.id)
    return vendor


@store_errors('update_vendor')
@transaction.atomic
def update_vendor(*, owner, vendor_id: UUID, **fields) -> Vendor:
    """
    Update vendor details.

    Only ``name``, ``phone`` and ``address`` are editable; unknown keys are
    ignored. Balance snapshot fields are maintained by the balance service.
    """
    vendor = get_vendor(owner=owner, vendor_id=vendor_id, for_update=True)

    changed = []
    for field in EDITABLE_FIELDS:
        if field not in fields:
            continue
        value = fields[field]
        if field == 'name':
            value = _clean_name(value)
        setattr(vendor, field, value or '')
        changed.append(field)

    if changed:
        vendor.save()
    return vendor


@store_errors('delete_vendor')
@transaction.atomic
def delete_vendor(*, owner, vendor_id: UUID) -> None:
    """Delete a vendor together with its transactions and payments."""
    vendor = get_vendor(owner=owner, vendor_id=vendor_id)
    vendor.delete()
    logger.info("Deleted vendor %s for user %s", vendor_id, owner.id)


def list_vendors(*, owner) -> QuerySet:
    """Owner's vendors by name, annotated with live balance figures."""
    require_owner(owner)
    return Vendor.objects.filter(owner=owner).with_balances()


def search_vendors(*, owner, term: str) -> QuerySet:
    """Case-insensitive name prefix search."""
    require_owner(owner)
    term = (term or '').strip().lower()
    queryset = Vendor.objects.filter(owner=owner)
    if term:
        queryset = queryset.filter(name_lower__startswith=term)
    return queryset.with_balances()
