# accounting/api/views/__init__.py

"""
accounting.api.views package

Important:
- ViewSets are defined in accounting.api.view (singular) in this codebase.
- Do NOT import accounting.api.urls from here to avoid circular imports.
"""

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

__all__ = [
    "AccountListCreateView",
    "AccountDetailView",
    "AccountBalanceView",
    "AccountStatementView",
    "CashbookListCreateView",
    "CashbookDetailView",
    "AccountsBalanceReportView",
    "SubHeadBalanceReportView",
    "CreditDebitReportView",
    "CashbookReportView",
    "CashInHandView",
]
