"""Services for summaries business logic."""

from .compiler import (
    compile_monthly_summary,
    calculate_monthly_summary,
    get_monthly_summary,
    get_current_monthly_summary,
)
from .invalidation import (
    invalidate_month,
    invalidate_owner,
)
from .overview import (
    get_home_summary,
    get_yearly_summary,
    get_transaction_history,
)

__all__ = [
    # Monthly summaries
    'compile_monthly_summary',
    'calculate_monthly_summary',
    'get_monthly_summary',
    'get_current_monthly_summary',
    # Cache invalidation
    'invalidate_month',
    'invalidate_owner',
    # Overviews
    'get_home_summary',
    'get_yearly_summary',
    'get_transaction_history',
]
