"""Services for reports business logic."""

from .report_data import (
    REPORT_PERIODS,
    REPORT_TYPES,
    DateRange,
    get_date_range_for_period,
    fetch_report_data,
)
from .rendering import (
    render_report_html,
    export_pdf,
)

__all__ = [
    'REPORT_PERIODS',
    'REPORT_TYPES',
    'DateRange',
    'get_date_range_for_period',
    'fetch_report_data',
    'render_report_html',
    'export_pdf',
]
