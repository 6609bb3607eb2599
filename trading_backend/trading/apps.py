# trading/apps.py

"""
TRADING APP CONFIG

Goods documents that post to the ledger:
- Import entries (IMP###)
- Export entries (HAH###)
- Invoices (INV###)
"""

from django.apps import AppConfig


class TradingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "trading"
    verbose_name = "Trading Documents"
