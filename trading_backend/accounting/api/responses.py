# accounting/api/responses.py

"""
Shared response helpers for the accounting and trading APIs.

Service errors map to HTTP as:
- NotFoundError          → 404
- StoreUnavailableError  → 503
- any other service error → 400
"""

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    NotFoundError,
    StoreUnavailableError,
)

VIEW_LEDGER_PERMISSION = "accounting.view_ledgerentry"


def forbidden(detail: str) -> Response:
    return Response({"detail": detail}, status=status.HTTP_403_FORBIDDEN)


def service_error_response(exc: AccountingServiceError) -> Response:
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, StoreUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({"detail": str(exc)}, status=code)
