"""ORM expressions for money sums computed in the database."""

from decimal import Decimal

from django.db.models import DecimalField, Subquery, Sum, Value
from django.db.models.functions import Coalesce

MONEY = DecimalField(max_digits=14, decimal_places=2)


def money_sum(field):
    """``Sum`` that yields 0.00 instead of NULL on empty sets."""
    return Coalesce(Sum(field), Value(Decimal('0.00')), output_field=MONEY)


def sum_subquery(queryset, field, group_by):
    """
    Correlated per-row sum for annotating a parent queryset.

    ``queryset`` must already be filtered against ``OuterRef('pk')``.
    Several of these can annotate the same parent without the row
    multiplication a join-based ``Sum`` would cause.
    """
    totals = (
        queryset
        .order_by()
        .values(group_by)
        .annotate(total=Sum(field))
        .values('total')
    )
    return Coalesce(Subquery(totals, output_field=MONEY), Value(Decimal('0.00')), output_field=MONEY)


