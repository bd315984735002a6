"""
Domain exceptions for the ledger apps.

This module defines the exception hierarchy shared by the vendors,
customers, summaries and reports services. Services raise these errors;
views catch ``LedgerServiceError`` and turn it into an ``{"error": ...}``
response using the exception's ``status_code``.

Exception Hierarchy:
    LedgerServiceError (base)
    ├── NotAuthenticatedError
    ├── EntityNotFoundError
    ├── TransactionNotFoundError
    ├── StoreError
    ├── LedgerValidationError
    ├── InvalidPeriodError
    └── UnknownReportTypeError

Usage:
    from apps.ledger.exceptions import EntityNotFoundError

    try:
        vendor = Vendor.objects.get(id=vendor_id, owner=owner)
    except Vendor.DoesNotExist:
        raise EntityNotFoundError("Vendor not found")
"""


class LedgerServiceError(Exception):
    """
    Base exception for all ledger service errors.

    Subclasses set ``status_code`` so views can answer with a matching
    HTTP status without a per-view mapping table::

        try:
            balance = get_vendor_remaining_balance(owner=request.user, vendor_id=pk)
        except LedgerServiceError as e:
            return Response({'error': str(e)}, status=e.status_code)
    """

    status_code = 400


class NotAuthenticatedError(LedgerServiceError):
    """No acting user was supplied to a ledger operation."""

    status_code = 401


class EntityNotFoundError(LedgerServiceError):
    """Vendor or customer does not exist or belongs to another user."""

    status_code = 404


class TransactionNotFoundError(LedgerServiceError):
    """Transaction does not exist for the given vendor or customer."""

    status_code = 404


class StoreError(LedgerServiceError):
    """
    Underlying database read or write failed.

    The original database error message is passed through verbatim.
    """

    status_code = 503


class LedgerValidationError(LedgerServiceError):
    """
    Required field missing or invalid.

    Example:
        raise LedgerValidationError("Valid payment amount is required")
    """

    pass


class InvalidPeriodError(LedgerServiceError):
    """Year/month or reporting period is out of range."""

    pass


class UnknownReportTypeError(LedgerServiceError):
    """Requested report type is not supported."""

    pass
