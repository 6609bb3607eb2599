# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

# Read-only ViewSets live in accounting/api/view.py (singular).
from accounting.api.view import ActivityLogViewSet, LedgerEntryViewSet
from accounting.api.views.accounts import (
    AccountBalanceView,
    AccountDetailView,
    AccountListCreateView,
    AccountStatementView,
)
from accounting.api.views.cashbook import CashbookDetailView, CashbookListCreateView
from accounting.api.views.reports import (
    AccountsBalanceReportView,
    CashbookReportView,
    CashInHandView,
    CreditDebitReportView,
    SubHeadBalanceReportView,
)

router = DefaultRouter()
router.register("ledger-entries", LedgerEntryViewSet, basename="ledger-entry")
router.register("activity-logs", ActivityLogViewSet, basename="activity-log")

urlpatterns = [
    # Router endpoints
    path("", include(router.urls)),
    # Accounts
    path("accounts/", AccountListCreateView.as_view(), name="accounts"),
    path("accounts/<int:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("accounts/<int:account_id>/balance/", AccountBalanceView.as_view(), name="account-balance"),
    path("accounts/<int:account_id>/statement/", AccountStatementView.as_view(), name="account-statement"),
    # Cashbook
    path("cashbook/", CashbookListCreateView.as_view(), name="cashbook"),
    path("cashbook/<int:entry_id>/", CashbookDetailView.as_view(), name="cashbook-detail"),
    # Reports
    path("reports/accounts-balance/", AccountsBalanceReportView.as_view(), name="report-accounts-balance"),
    path("reports/sub-head-balance/", SubHeadBalanceReportView.as_view(), name="report-sub-head-balance"),
    path("reports/credit-debit/", CreditDebitReportView.as_view(), name="report-credit-debit"),
    path("reports/cashbook/", CashbookReportView.as_view(), name="report-cashbook"),
    path("reports/cash-in-hand/", CashInHandView.as_view(), name="report-cash-in-hand"),
]
