"""Preconditions shared by every ledger service."""

import logging
from contextlib import contextmanager
from decimal import Decimal

from django.db import DatabaseError

from .calculations import has_override, parse_amount, to_money
from .exceptions import LedgerValidationError, NotAuthenticatedError, StoreError

logger = logging.getLogger(__name__)


def require_owner(owner):
    """
    Return ``owner`` or raise if no signed-in user is acting.

    Every ledger operation is namespaced by its owner, so this runs before
    any query is issued.
    """
    if owner is None or not getattr(owner, 'is_authenticated', False):
        raise NotAuthenticatedError("No authenticated user found")
    return owner


@contextmanager
def store_errors(operation: str):
    """
    Translate database failures into ``StoreError``.

    The whole operation is aborted; callers never see a partial result.
    """
    try:
        yield
    except DatabaseError as e:
        logger.exception("Store failure during %s", operation)
        raise StoreError(str(e)) from e


# Largest value the 12-digit, 2-place money columns hold
MAX_STORED_AMOUNT = Decimal('9999999999.99')


def validate_stored_amounts(**amounts) -> None:
    """
    Reject money values too large for their column.

    Raises:
        LedgerValidationError: naming the first field over the limit
    """
    for field, value in amounts.items():
        if abs(value) > MAX_STORED_AMOUNT:
            raise LedgerValidationError(f"{field} exceeds the maximum of {MAX_STORED_AMOUNT}")


def validate_payment_amount(amount) -> Decimal:
    """
    Parse a payment amount and round it to cents.

    Missing, non-numeric and oversized values are rejected, as is anything
    that rounds to zero or below.

    Raises:
        LedgerValidationError: "Valid payment amount is required"
    """
    if not has_override(amount):
        raise LedgerValidationError("Valid payment amount is required")

    raw = parse_amount(amount)
    if raw > MAX_STORED_AMOUNT:
        raise LedgerValidationError(f"amount exceeds the maximum of {MAX_STORED_AMOUNT}")

    money = to_money(raw)
    if money <= 0:
        raise LedgerValidationError("Valid payment amount is required")
    return money
