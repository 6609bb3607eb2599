# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountBalanceSerializer,
    AccountSerializer,
    AccountWriteSerializer,
)
from accounting.api.serializers.cashbook import (
    CashbookEntrySerializer,
    CashbookEntryWriteSerializer,
)
from accounting.api.serializers.ledger_entries import (
    ActivityLogSerializer,
    LedgerEntrySerializer,
)
from accounting.api.serializers.reports import (
    AccountsBalanceQuerySerializer,
    AsOfQuerySerializer,
    CashbookReportQuerySerializer,
    CreditDebitQuerySerializer,
    DashboardQuerySerializer,
    DateRangeQuerySerializer,
    RequiredDateRangeQuerySerializer,
)

__all__ = [
    "AccountSerializer",
    "AccountWriteSerializer",
    "AccountBalanceSerializer",
    "CashbookEntrySerializer",
    "CashbookEntryWriteSerializer",
    "LedgerEntrySerializer",
    "ActivityLogSerializer",
    "AsOfQuerySerializer",
    "AccountsBalanceQuerySerializer",
    "CashbookReportQuerySerializer",
    "CreditDebitQuerySerializer",
    "DashboardQuerySerializer",
    "DateRangeQuerySerializer",
    "RequiredDateRangeQuerySerializer",
]
