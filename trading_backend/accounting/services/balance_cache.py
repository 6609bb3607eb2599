# PATH: accounting/services/balance_cache.py

"""
BALANCE CACHE REFRESH

Account.current_balance and CashbookEntry.balance_after are denormalized
copies of the ledger fold. They are refreshed inside the same transaction as
the posting that changed them, and can be rebuilt at any time with
`manage.py rebuild_balances`.

The ledger always wins: a refresh recomputes from LedgerEntry, never from
the previous cached value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from django.conf import settings
from django.db import transaction

from accounting.models.account import Account
from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry
from accounting.services import ledger_store
from accounting.services.balance_service import running_balances_for_account

logger = logging.getLogger("ledger")


@dataclass(frozen=True)
class CacheDrift:
    account_id: int
    account_name: str
    cached: Decimal
    computed: Decimal
    stale_cashbook_rows: int


def cache_enabled() -> bool:
    return bool(getattr(settings, "LEDGER_BALANCE_CACHE_ENABLED", True))


def _computed_cache(account) -> tuple[Decimal, Dict[int, Decimal]]:
    rows = running_balances_for_account(account)

    cashbook_balances: Dict[int, Decimal] = {}
    for entry, balance in rows:
        if entry.reference_type == LedgerEntry.REF_CASHBOOK:
            try:
                cashbook_balances[int(entry.reference_id)] = balance
            except (TypeError, ValueError):
                logger.warning(
                    "Cashbook posting with non-numeric reference_id",
                    extra={"ledger_entry_id": entry.id, "reference_id": entry.reference_id},
                )

    closing = rows[-1][1] if rows else account.signed_opening_balance
    return closing, cashbook_balances


@transaction.atomic
def refresh_account_balance(account_id, *, force: bool = False) -> Decimal:
    """
    Recompute and store the cached balances of one account.

    Locks the account row for the duration of the enclosing transaction.
    Returns the computed closing balance.
    """
    account = ledger_store.lock_account(account_id)
    closing, cashbook_balances = _computed_cache(account)

    if not (force or cache_enabled()):
        return closing

    ledger_store.update_account_denormalized_balance(account.id, closing)

    live_ids = set(cashbook_balances)
    stale = CashbookEntry.objects.filter(account_id=account.id, is_deleted=False, id__in=live_ids)
    for cb in stale.only("id", "balance_after"):
        new_balance = cashbook_balances[cb.id]
        if cb.balance_after != new_balance:
            CashbookEntry.objects.filter(pk=cb.id).update(balance_after=new_balance)

    logger.debug(
        "Balance cache refreshed",
        extra={"account_id": account.id, "balance": str(closing)},
    )
    return closing


def find_drift(account_ids=None) -> List[CacheDrift]:
    """
    Accounts whose cached balances disagree with the ledger fold. Read-only.
    """
    qs = Account.objects.all().order_by("id")
    if account_ids:
        qs = qs.filter(id__in=list(account_ids))

    drift = []
    for account in qs:
        closing, cashbook_balances = _computed_cache(account)

        stale_rows = 0
        cached_rows = CashbookEntry.objects.filter(
            account_id=account.id,
            is_deleted=False,
            id__in=list(cashbook_balances),
        ).values_list("id", "balance_after")
        for cb_id, cached in cached_rows:
            if cached != cashbook_balances[cb_id]:
                stale_rows += 1

        if account.current_balance != closing or stale_rows:
            drift.append(
                CacheDrift(
                    account_id=account.id,
                    account_name=account.account_name,
                    cached=account.current_balance,
                    computed=closing,
                    stale_cashbook_rows=stale_rows,
                )
            )
    return drift
