import logging

from django.db import DatabaseError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .exceptions import LedgerServiceError, StoreError

logger = logging.getLogger(__name__)


def error_response(error):
    """Turn a ledger service error into an ``{"error": ...}`` response."""
    return Response({'error': str(error)}, status=error.status_code)


def ledger_exception_handler(exc, context):
    """
    DRF exception handler for errors escaping a view.

    Lazy querysets are evaluated while the response is serialized, after
    the service call returned, so database failures there are answered
    here as ``StoreError`` (503) instead of a 500.
    """
    if isinstance(exc, DatabaseError):
        logger.exception("Store failure in %s", context['view'].__class__.__name__)
        exc = StoreError(str(exc))

    if isinstance(exc, LedgerServiceError):
        return error_response(exc)
    return exception_handler(exc, context)
