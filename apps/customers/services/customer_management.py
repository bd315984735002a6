"""Customer management service - CRUD and search for customers."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet
from uuid import UUID

from apps.customers.models import Customer
from apps.ledger.exceptions import EntityNotFoundError, LedgerValidationError
from apps.ledger.guards import require_owner, store_errors

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'phone', 'address')


def _clean_name(name) -> str:
    name = (name or '').strip()
    if not name:
        raise LedgerValidationError("Customer name is required")
    return name


def get_customer(*, owner, customer_id: UUID, for_update: bool = False) -> Customer:
    """
    Fetch one of the owner's customers.

    Raises:
        NotAuthenticatedError: If no owner is given
        EntityNotFoundError: If the customer doesn't exist or belongs to someone else
    """
    require_owner(owner)
    queryset = Customer.objects.filter(owner=owner)
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=customer_id)
    except (Customer.DoesNotExist, DjangoValidationError):
        raise EntityNotFoundError("Customer not found")


@store_errors('create_customer')
def create_customer(*, owner, name: str, phone: str = '', address: str = '') -> Customer:
    """Create a customer for the owner (name required)."""
    require_owner(owner)
    customer = Customer.objects.create(
        owner=owner,
        name=_clean_name(name),
        phone=phone or '',
        address=address or '',
    )
    logger.info("Created customer %s for user %s", customer.id, owner.id)
    return customer


@store_errors('update_customer')
@transaction.atomic
def update_customer(*, owner, customer_id: UUID, **fields) -> Customer:
    """Update ``name``, ``phone`` or ``address``; other keys are ignored."""
    customer = get_customer(owner=owner, customer_id=customer_id, for_update=True)

    changed = False
    for field in EDITABLE_FIELDS:
        if field in fields:
            value = _clean_name(fields[field]) if field == 'name' else fields[field]
            setattr(customer, field, value or '')
            changed = True

    if changed:
        customer.save()
    return customer


@store_errors('delete_customer')
@transaction.atomic
def delete_customer(*, owner, customer_id: UUID) -> None:
    """Delete a customer with its transactions and their payments."""
    customer = get_customer(owner=owner, customer_id=customer_id)
    customer.delete()
    logger.info("Deleted customer %s for user %s", customer_id, owner.id)


def list_customers(*, owner) -> QuerySet:
    """Owner's customers by name, annotated with live balances."""
    require_owner(owner)
    return Customer.objects.filter(owner=owner).with_balances()


def search_customers(*, owner, term: str) -> QuerySet:
    """Case-insensitive name prefix search."""
    require_owner(owner)
    term = (term or '').strip().lower()
    queryset = Customer.objects.filter(owner=owner)
    if term:
        queryset = queryset.filter(name_lower__startswith=term)
    return queryset.with_balances()
