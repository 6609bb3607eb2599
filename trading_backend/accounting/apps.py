# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Ledger core:
- Accounts (sub-head ledgers) + cached balances
- Cashbook
- Immutable ledger entries + posting rules
- Activity log
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting Ledger"
