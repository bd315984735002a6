"""
Customer transaction service.

A customer transaction is a sale; its total equals the material amount.
Payments received are child rows of the transaction, and after every
change to either side the transaction's ``total_payments`` and
``outstanding_amount`` are refreshed from the database.
"""

import logging
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.customers.models import CustomerPayment, CustomerTransaction
from apps.ledger.calculations import (
    apply_customer_patch,
    calculate_customer_totals,
    normalize_items,
)
from apps.ledger.exceptions import LedgerValidationError, TransactionNotFoundError
from apps.ledger.guards import (
    require_owner,
    store_errors,
    validate_payment_amount,
    validate_stored_amounts,
)
from .customer_management import get_customer

logger = logging.getLogger(__name__)


def _field(payment, name, default=None):
    value = payment.get(name, default)
    return default if value is None else value


def _create_payments(customer_transaction, payments) -> list:
    """Validate and attach payments ``[{amount, date?, payment_method?, notes?}]``."""
    created = []
    for payment in payments or []:
        created.append(CustomerPayment.objects.create(
            transaction=customer_transaction,
            amount=validate_payment_amount(payment.get('amount')),
            date=_field(payment, 'date', timezone.localdate()),
            payment_method=_field(payment, 'payment_method', ''),
            notes=_field(payment, 'notes', ''),
        ))
    return created


@store_errors('add_customer_transaction')
@transaction.atomic
def add_customer_transaction(
    *,
    owner,
    customer_id: UUID,
    date: date_type,
    items: Optional[list] = None,
    material_amount=None,
    payments: Optional[list] = None,
    notes: str = ''
) -> CustomerTransaction:
    """
    Record a sale to a customer, optionally with payments already received.

    Args:
        owner: Acting user
        customer_id: Customer UUID
        date: Sale date
        items: Line items ``[{name, quantity, unit_price}]``
        material_amount: Optional manual amount (wins over items)
        payments: Optional initial payments
        notes: Free text

    Returns:
        Created CustomerTransaction with payment totals filled in

    Raises:
        EntityNotFoundError: If customer doesn't belong to owner
        LedgerValidationError: If date is missing or a payment amount is invalid
    """
    customer = get_customer(owner=owner, customer_id=customer_id)
    if not date:
        raise LedgerValidationError("Transaction date is required")

    totals = calculate_customer_totals(items, material_amount)
    validate_stored_amounts(total_amount=totals.total_amount)
    customer_transaction = CustomerTransaction.objects.create(
        customer=customer,
        date=date,
        items=normalize_items(items),
        material_amount=totals.material_amount,
        total_amount=totals.total_amount,
        outstanding_amount=totals.total_amount,
        notes=notes or '',
    )
    if payments:
        _create_payments(customer_transaction, payments)
        customer_transaction.update_payment_totals()

    return customer_transaction


def get_customer_transaction(*, owner, customer_id: UUID, transaction_id: UUID,
                             for_update: bool = False) -> CustomerTransaction:
    """
    Fetch one transaction of the owner's customer.

    Raises:
        EntityNotFoundError: If customer not found
        TransactionNotFoundError: If transaction not found for that customer
    """
    customer = get_customer(owner=owner, customer_id=customer_id)
    queryset = CustomerTransaction.objects.filter(customer=customer)
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(id=transaction_id)
    except (CustomerTransaction.DoesNotExist, DjangoValidationError):
        raise TransactionNotFoundError("Transaction not found")


def get_customer_transactions(
    *,
    owner,
    customer_id: UUID,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None
) -> QuerySet:
    """Customer transactions with their payments, newest first."""
    customer = get_customer(owner=owner, customer_id=customer_id)
    queryset = (
        CustomerTransaction.objects
        .filter(customer=customer)
        .select_related('customer')
        .prefetch_related('payments')
    )
    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lte=end_date)
    return queryset.order_by('-date', '-created_at')


@store_errors('update_customer_transaction')
@transaction.atomic
def update_customer_transaction(*, owner, customer_id: UUID, transaction_id: UUID,
                                data: dict) -> CustomerTransaction:
    """
    Apply a partial update to a customer transaction.

    A ``payments`` list in ``data`` replaces the existing payments; without
    it the stored payments are kept. Payment totals are refreshed either
    way since the total amount may have changed.
    """
    customer_transaction = get_customer_transaction(
        owner=owner,
        customer_id=customer_id,
        transaction_id=transaction_id,
        for_update=True,
    )

    if 'date' in data:
        if not data['date']:
            raise LedgerValidationError("Transaction date is required")
        customer_transaction.date = data['date']
    if 'items' in data:
        customer_transaction.items = normalize_items(data['items'])
    if 'notes' in data:
        customer_transaction.notes = data['notes'] or ''

    updates = apply_customer_patch(data)
    validate_stored_amounts(**updates)
    for field, value in updates.items():
        setattr(customer_transaction, field, value)
    customer_transaction.save()

    if 'payments' in data:
        customer_transaction.payments.all().delete()
        _create_payments(customer_transaction, data['payments'])

    customer_transaction.update_payment_totals()
    return customer_transaction


@store_errors('delete_customer_transaction')
@transaction.atomic
def delete_customer_transaction(*, owner, customer_id: UUID, transaction_id: UUID) -> None:
    """Delete a customer transaction and its payments."""
    customer_transaction = get_customer_transaction(
        owner=owner,
        customer_id=customer_id,
        transaction_id=transaction_id,
    )
    customer_transaction.delete()


@store_errors('add_payment_to_transaction')
@transaction.atomic
def add_payment_to_transaction(
    *,
    owner,
    customer_id: UUID,
    transaction_id: UUID,
    amount,
    date: Optional[date_type] = None,
    payment_method: str = '',
    notes: str = ''
) -> CustomerTransaction:
    """
    Record a payment received against a customer transaction.

    The transaction row is locked while the payment is added and its
    totals refreshed, so ``outstanding_amount`` drops by exactly ``amount``.

    Args:
        date: Payment date, today when omitted

    Returns:
        The updated CustomerTransaction

    Raises:
        LedgerValidationError: If amount is missing, non-numeric or not positive
        EntityNotFoundError / TransactionNotFoundError: If lookup fails
    """
    require_owner(owner)
    amount = validate_payment_amount(amount)
    customer_transaction = get_customer_transaction(
        owner=owner,
        customer_id=customer_id,
        transaction_id=transaction_id,
        for_update=True,
    )

    payment = CustomerPayment.objects.create(
        transaction=customer_transaction,
        amount=amount,
        date=date or timezone.localdate(),
        payment_method=payment_method or '',
        notes=notes or '',
    )
    customer_transaction.update_payment_totals()

    logger.info(
        "Customer payment %s of %s on transaction %s",
        payment.id, amount, customer_transaction.id
    )
    return customer_transaction
