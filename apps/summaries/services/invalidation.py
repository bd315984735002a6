"""
Monthly summary invalidation.

Writes never recompute a summary directly. They mark the cached row of
every affected month stale, and the next read recompiles it.
"""

import logging
from datetime import date

from apps.summaries.models import MonthlySummary

logger = logging.getLogger(__name__)


def invalidate_month(*, owner_id, day: date) -> int:
    """Mark the owner's summary for the month containing ``day`` stale."""
    if owner_id is None or day is None:
        return 0
    if isinstance(day, str):
        day = date.fromisoformat(day)

    updated = MonthlySummary.objects.filter(
        owner_id=owner_id,
        year=day.year,
        month=day.month,
        is_stale=False,
    ).update(is_stale=True)
    if updated:
        logger.debug("Summary %s_%02d of user %s marked stale", day.year, day.month, owner_id)
    return updated


def invalidate_owner(*, owner_id) -> int:
    """Mark every cached summary of the owner stale."""
    updated = MonthlySummary.objects.filter(owner_id=owner_id, is_stale=False).update(is_stale=True)
    if updated:
        logger.debug("%d summaries of user %s marked stale", updated, owner_id)
    return updated
