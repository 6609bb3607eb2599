# accounting/models/__init__.py

"""
Accounting models package.

Imports only: model modules import each other directly
(e.g. accounting.models.account) to keep the load order explicit.
"""

from accounting.models.account import Account
from accounting.models.activity import ActivityLog
from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry

__all__ = [
    "Account",
    "ActivityLog",
    "CashbookEntry",
    "LedgerEntry",
]
