# trading/services/exceptions.py

from accounting.services.exceptions import AccountingServiceError, NotFoundError


class TradeEntryError(AccountingServiceError):
    """Raised when a trade document payload is invalid."""


class TradeEntryNotFoundError(NotFoundError):
    """Raised when a trade document does not exist or was deleted."""


class MasterDataError(AccountingServiceError):
    """Raised when a product / vehicle payload is invalid or clashes with an active row."""


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist or is inactive."""


class VehicleNotFoundError(NotFoundError):
    """Raised when a vehicle does not exist, or a document names an unregistered vehicle."""
