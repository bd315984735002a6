"""
Ledger Calculations Module
==========================

Pure functions for transaction totals and payment aggregation. Nothing in
this module touches the database; the vendors and customers services call
these helpers when creating or patching transactions, and the balance
reducers use them to fold payments into outstanding amounts.

All money is handled as ``Decimal``. Input coming from clients is parsed
defensively: anything that is not a finite number counts as zero instead
of propagating ``NaN`` into stored totals.

Example:
    Vendor transaction totals::

        from apps.ledger.calculations import calculate_vendor_totals

        totals = calculate_vendor_totals(
            items=[{'name': 'Cement', 'quantity': 10, 'unit_price': 5}],
            transport_charge=20,
        )
        # totals.material_amount == Decimal('50.00')
        # totals.total_amount == Decimal('70.00')
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, NamedTuple, Optional


ZERO = Decimal('0.00')
CENT = Decimal('0.01')


class TransactionTotals(NamedTuple):
    material_amount: Decimal
    total_amount: Decimal


class PaymentAggregate(NamedTuple):
    total: Decimal
    count: int
    latest_date: Optional[Any]


def parse_amount(value) -> Decimal:
    """
    Coerce a client-supplied number into a finite ``Decimal``.

    ``None``, booleans, empty strings, non-numeric strings, NaN and
    infinities all become zero.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO

    if not amount.is_finite():
        return ZERO
    return amount


def to_money(value) -> Decimal:
    """Round to cents (half up)."""
    return parse_amount(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _field(obj, name):
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def items_subtotal(items: Optional[Iterable]) -> Decimal:
    """Sum of ``quantity * unit_price`` over line items."""
    subtotal = ZERO
    for item in items or []:
        quantity = parse_amount(_field(item, 'quantity'))
        unit_price = parse_amount(_field(item, 'unit_price'))
        subtotal += quantity * unit_price
    return to_money(subtotal)


def normalize_items(items: Optional[Iterable]) -> list:
    """Line items as JSON-safe dicts; numbers are stored as decimal strings."""
    normalized = []
    for item in items or []:
        normalized.append({
            'name': str(_field(item, 'name') or ''),
            'quantity': str(parse_amount(_field(item, 'quantity'))),
            'unit_price': str(parse_amount(_field(item, 'unit_price'))),
        })
    return normalized


def has_override(value) -> bool:
    """An explicit material amount counts as supplied unless None or blank."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def calculate_material_amount(items, override=None) -> Decimal:
    """
    Material amount of a transaction.

    The override wins whenever it is supplied, regardless of item contents.
    Without an override the amount is the items subtotal (zero for an empty
    item list).
    """
    if has_override(override):
        return to_money(override)
    return items_subtotal(items)


def calculate_vendor_totals(items, material_amount=None, transport_charge=None) -> TransactionTotals:
    """Vendor totals: ``total = material + transport`` (transport defaults to 0)."""
    material = calculate_material_amount(items, material_amount)
    return TransactionTotals(
        material_amount=material,
        total_amount=material + to_money(transport_charge),
    )


def calculate_customer_totals(items, material_amount=None) -> TransactionTotals:
    """Customer totals: there is no surcharge, ``total == material``."""
    material = calculate_material_amount(items, material_amount)
    return TransactionTotals(material_amount=material, total_amount=material)


def _patched_material(patch) -> Optional[Decimal]:
    if has_override(patch.get('material_amount')):
        return to_money(patch['material_amount'])
    if 'items' in patch:
        return items_subtotal(patch['items'])
    return None


def apply_vendor_patch(patch: Mapping, *, current_material, current_transport) -> dict:
    """
    Compute the amount fields affected by a partial vendor update.

    Only fields derivable from the patch are returned. ``total_amount`` is
    recomputed when the material amount or the transport charge changes,
    using the stored value for whichever of the two was not resupplied.
    """
    updates = {}

    material = _patched_material(patch)
    if material is not None:
        updates['material_amount'] = material

    if 'transport_charge' in patch:
        updates['transport_charge'] = to_money(patch['transport_charge'])

    if updates:
        updates['total_amount'] = (
            updates.get('material_amount', current_material)
            + updates.get('transport_charge', current_transport)
        )
    return updates


def apply_customer_patch(patch: Mapping) -> dict:
    """Amount fields affected by a partial customer update (total follows material)."""
    material = _patched_material(patch)
    if material is None:
        return {}
    return {'material_amount': material, 'total_amount': material}


def aggregate_payments(payments: Optional[Iterable]) -> PaymentAggregate:
    """
    Fold payments into their sum, count and latest date.

    Accepts mappings or model instances exposing ``amount`` and ``date``.
    """
    total = ZERO
    count = 0
    latest = None
    for payment in payments or []:
        total += parse_amount(_field(payment, 'amount'))
        count += 1
        paid_on = _field(payment, 'date')
        if paid_on is not None and (latest is None or paid_on > latest):
            latest = paid_on
    return PaymentAggregate(total=to_money(total), count=count, latest_date=latest)


def outstanding_amount(total_amount, payments_total) -> Decimal:
    """Unclamped outstanding amount; overpayment gives a negative value."""
    return to_money(parse_amount(total_amount) - parse_amount(payments_total))


def portfolio_outstanding(balances: Iterable) -> Decimal:
    """Portfolio rollup: each entity contributes ``max(0, balance)``."""
    return to_money(sum((max(ZERO, parse_amount(b)) for b in balances), ZERO))
