"""Report HTML rendering and PDF export."""

from django.template.loader import render_to_string

from apps.ledger.exceptions import UnknownReportTypeError
from .report_data import REPORT_TYPES


def report_title(report_type: str, data: dict) -> str:
    label = data['date_range'].label
    if report_type == 'overall':
        return f"Overall Summary ({label})"
    if report_type == 'vendor_payments':
        return f"Vendor Payments ({label})"
    return report_type.capitalize()


def render_report_html(report_type: str, data: dict, currency_symbol: str) -> str:
    """
    Render report data to a standalone HTML document.

    Pure templating: the output depends only on the arguments.
    """
    if report_type not in REPORT_TYPES:
        raise UnknownReportTypeError(f"Unknown report type: {report_type}")

    context = dict(data)
    context.update({
        'title': report_title(report_type, data),
        'currency': currency_symbol,
    })
    return render_to_string(f'reports/{report_type}.html', context)


def export_pdf(html: str) -> bytes:
    """Convert a rendered report to PDF bytes with WeasyPrint."""
    from weasyprint import HTML

    return HTML(string=html).write_pdf()
