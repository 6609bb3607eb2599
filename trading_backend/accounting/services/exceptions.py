# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for accounting services.

HTTP mapping used by the API layer:
- NotFoundError          → 404
- InvalidQueryError      → 400 (InvalidRangeError included)
- PostingRuleError       → 400
- StoreUnavailableError  → 503
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class NotFoundError(AccountingServiceError):
    """Raised when a requested record does not exist."""


class AccountNotFoundError(NotFoundError):
    """Raised when a posting targets a missing or inactive account."""


class EntryNotFoundError(NotFoundError):
    """Raised when a cashbook entry or ledger entry cannot be found."""


class InvalidQueryError(AccountingServiceError):
    """Raised when report or query parameters are invalid."""


class InvalidRangeError(InvalidQueryError):
    """Raised when a date range has from_date > to_date."""


class PostingRuleError(AccountingServiceError):
    """Raised when a posting rule cannot be applied."""


class StoreUnavailableError(AccountingServiceError):
    """Raised when the ledger store cannot be reached."""
