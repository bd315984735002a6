from datetime import date

from django import template

from apps.ledger.calculations import parse_amount, to_money

register = template.Library()


@register.filter
def money(value, currency=''):
    """Format an amount with thousands separators, e.g. ``₹1,250.00``."""
    amount = to_money(value)
    sign = '-' if amount < 0 else ''
    return f"{sign}{currency}{abs(amount):,.2f}"


@register.filter
def month_label(summary):
    """``March 2025`` for a monthly summary."""
    return date(summary.year, summary.month, 1).strftime('%B %Y')


@register.filter
def items_text(items, currency=''):
    """One-line description of transaction line items."""
    parts = []
    for item in items or []:
        quantity = parse_amount(item.get('quantity')).normalize()
        parts.append(
            f"{item.get('name') or 'Item'} ({quantity:f} × {money(item.get('unit_price'), currency)})"
        )
    return ', '.join(parts) or '-'
