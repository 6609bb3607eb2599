# PATH: accounting/services/ledger_store.py

"""
LEDGER STORE

The only module that reads or writes Account / LedgerEntry rows on behalf of
the balance engine and the posting rules.

RULES:
- Never computes balances; it stores and returns rows
- Soft-deleted entries are excluded unless explicitly requested
- Entries come back in posting order: (entry_date, created_at, id)
- Transport failures (OperationalError / InterfaceError) surface as
  StoreUnavailableError and are never retried here
"""

from __future__ import annotations

import functools
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import InterfaceError, OperationalError
from django.db.models import Sum
from django.db.models.functions import Coalesce

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.services.exceptions import (
    AccountNotFoundError,
    EntryNotFoundError,
    NotFoundError,
    StoreUnavailableError,
)

logger = logging.getLogger("ledger")

ZERO = Decimal("0.00")


def _translate_store_errors(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (OperationalError, InterfaceError) as exc:
            logger.error(
                "Ledger store unavailable",
                extra={"operation": fn.__name__, "error": str(exc)},
            )
            raise StoreUnavailableError(f"Ledger store unavailable: {exc}") from exc

    return wrapper


def _as_pk(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise NotFoundError(f"Invalid id: {value!r}") from exc


# ============================================================
# ACCOUNTS
# ============================================================


@_translate_store_errors
def get_account(account_id) -> Account:
    pk = _as_pk(account_id)
    try:
        return Account.objects.get(pk=pk)
    except Account.DoesNotExist as exc:
        raise NotFoundError(f"Account {account_id} not found") from exc


@_translate_store_errors
def get_active_account(account_id, *, for_update: bool = False) -> Account:
    """
    Account eligible for new postings. Missing or inactive → AccountNotFoundError.
    """
    try:
        pk = _as_pk(account_id)
    except NotFoundError as exc:
        raise AccountNotFoundError(str(exc)) from exc

    qs = Account.objects.filter(pk=pk, is_active=True)
    if for_update:
        qs = qs.select_for_update()

    account = qs.first()
    if account is None:
        raise AccountNotFoundError(f"Account {account_id} not found or inactive")
    return account


@_translate_store_errors
def lock_account(account_id) -> Account:
    pk = _as_pk(account_id)
    try:
        return Account.objects.select_for_update().get(pk=pk)
    except Account.DoesNotExist as exc:
        raise NotFoundError(f"Account {account_id} not found") from exc


@_translate_store_errors
def lock_accounts(account_ids: Iterable) -> List[Account]:
    """
    Lock several account rows, always in ascending id order.

    Writers that touch two accounts (an entry moved from A to B) must call
    this before any single-row lock so concurrent A→B / B→A moves queue
    instead of deadlocking.
    """
    pks = sorted({_as_pk(a) for a in account_ids})
    return list(Account.objects.select_for_update().filter(pk__in=pks).order_by("pk"))


@_translate_store_errors
def list_active_accounts() -> List[Account]:
    return list(Account.objects.filter(is_active=True).order_by("account_name", "id"))


@_translate_store_errors
def update_account_denormalized_balance(account_id, new_balance: Decimal) -> None:
    Account.objects.filter(pk=_as_pk(account_id)).update(current_balance=new_balance)


# ============================================================
# LEDGER ENTRIES
# ============================================================


@_translate_store_errors
def query_entries(
    account_id,
    *,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    exclude_deleted: bool = True,
) -> List[LedgerEntry]:
    qs = LedgerEntry.objects.filter(account_id=_as_pk(account_id))

    if exclude_deleted:
        qs = qs.live()
    if date_from is not None:
        qs = qs.filter(entry_date__gte=date_from)
    if date_to is not None:
        qs = qs.filter(entry_date__lte=date_to)

    return list(qs.in_posting_order())


@_translate_store_errors
def sum_entries_by_account(
    account_ids: Iterable[int],
    *,
    as_of: Optional[date] = None,
) -> Dict[int, Tuple[Decimal, Decimal]]:
    """
    {account_id: (credit_total, debit_total)} over live entries, one query.
    Accounts with no entries are present with zeros.
    """
    ids = list(account_ids)
    totals = {acc_id: (ZERO, ZERO) for acc_id in ids}
    if not ids:
        return totals

    qs = LedgerEntry.objects.live().filter(account_id__in=ids)
    if as_of is not None:
        qs = qs.filter(entry_date__lte=as_of)

    rows = qs.values("account_id").annotate(
        credit_total=Coalesce(Sum("credit_amount"), ZERO),
        debit_total=Coalesce(Sum("debit_amount"), ZERO),
    )
    for r in rows:
        totals[r["account_id"]] = (r["credit_total"], r["debit_total"])

    return totals


@_translate_store_errors
def insert_entry(
    *,
    account_id: int,
    entry_date: date,
    credit_amount: Decimal,
    debit_amount: Decimal,
    detail: str,
    reference_type: str,
    reference_id: str,
    remarks: str = "",
) -> LedgerEntry:
    entry = LedgerEntry(
        account_id=account_id,
        entry_date=entry_date,
        credit_amount=credit_amount,
        debit_amount=debit_amount,
        detail=(detail or "")[:255],
        reference_type=reference_type,
        reference_id=str(reference_id),
        remarks=remarks or "",
    )
    entry.save()
    return entry


@_translate_store_errors
def soft_delete_entry(entry_id) -> None:
    pk = _as_pk(entry_id)
    updated = LedgerEntry.objects.filter(pk=pk).soft_delete()
    if not updated and not LedgerEntry.objects.filter(pk=pk).exists():
        raise EntryNotFoundError(f"Ledger entry {entry_id} not found")


@_translate_store_errors
def active_entries_for_reference(reference_type: str, reference_id) -> List[LedgerEntry]:
    return list(
        LedgerEntry.objects.live()
        .filter(reference_type=reference_type, reference_id=str(reference_id))
        .in_posting_order()
    )
