# accounting/services/balance_service.py

"""
BALANCE ENGINE (AUTHORITATIVE)

Read-only ledger aggregation helpers.

RULES:
- READ-ONLY: no writes, ever (cache refresh lives in balance_cache)
- LedgerEntry is the single source of truth; Account.current_balance is ignored
- Balance = signed opening + Σ(credit − debit) over live entries
- Accounting timeline is LedgerEntry.entry_date; ties break on (created_at, id)
- Credit is positive; zero reads as Credit
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.db.models import Case, DecimalField, F, Sum, Value, When
from django.db.models.functions import Coalesce

from accounting.models.account import Account
from accounting.models.cashbook import CashbookEntry
from accounting.services import ledger_store
from accounting.services.exceptions import InvalidRangeError
from accounting.statement import (
    ZERO,
    LedgerStatement,
    fold_statement,
    q2,
    running_balances,
    signed_amount,
    split_balance,
)


def _check_range(from_date: Optional[date], to_date: Optional[date]) -> None:
    if from_date is not None and to_date is not None and from_date > to_date:
        raise InvalidRangeError(
            f"from_date ({from_date.isoformat()}) must be on or before to_date ({to_date.isoformat()})"
        )


def _balance_for(account: Account, *, as_of: Optional[date] = None) -> Decimal:
    totals = ledger_store.sum_entries_by_account([account.id], as_of=as_of)
    credit, debit = totals[account.id]
    return q2(account.signed_opening_balance + signed_amount(credit_amount=credit, debit_amount=debit))


def account_balance(account_id, *, as_of: Optional[date] = None) -> Decimal:
    """
    Point-in-time balance of one account.

    as_of=None means all live entries; otherwise entries with entry_date <= as_of.
    Raises NotFoundError for an unknown account.
    """
    account = ledger_store.get_account(account_id)
    return _balance_for(account, as_of=as_of)


def account_balances(
    accounts: Iterable[Account],
    *,
    as_of: Optional[date] = None,
) -> Dict[int, Decimal]:
    """
    Bulk balances (no N+1): {account_id: balance}.
    """
    accounts = list(accounts)
    totals = ledger_store.sum_entries_by_account([a.id for a in accounts], as_of=as_of)

    out = {}
    for acc in accounts:
        credit, debit = totals[acc.id]
        out[acc.id] = q2(
            acc.signed_opening_balance + signed_amount(credit_amount=credit, debit_amount=debit)
        )
    return out


def ledger_statement(account_id, *, from_date: date, to_date: date) -> LedgerStatement:
    """
    Range-bounded statement with a running balance column.

    - opening_balance is the balance as of the day before from_date
    - rows are the live entries in [from_date, to_date] in posting order
    - totals cover rows only; the opening line is not part of them
    """
    _check_range(from_date, to_date)

    account = ledger_store.get_account(account_id)
    if from_date == date.min:
        # nothing can precede the first representable day
        opening = q2(account.signed_opening_balance)
    else:
        opening = _balance_for(account, as_of=from_date - timedelta(days=1))

    entries = ledger_store.query_entries(
        account.id,
        date_from=from_date,
        date_to=to_date,
    )

    return fold_statement(
        account_id=account.id,
        from_date=from_date,
        to_date=to_date,
        opening_balance=opening,
        entries=entries,
    )


def cash_in_hand(*, from_date: Optional[date] = None, to_date: Optional[date] = None) -> Decimal:
    """
    Σ CREDIT − Σ DEBIT across all live cashbook entries (all accounts).
    Unbounded ends mean all time.
    """
    _check_range(from_date, to_date)

    qs = CashbookEntry.objects.filter(is_deleted=False)
    if from_date is not None:
        qs = qs.filter(entry_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(entry_date__lte=to_date)

    money = DecimalField(max_digits=14, decimal_places=2)
    totals = qs.aggregate(
        credit_total=Coalesce(
            Sum(Case(When(pay_status=CashbookEntry.CREDIT, then=F("amount")), output_field=money)),
            Value(ZERO, output_field=money),
        ),
        debit_total=Coalesce(
            Sum(Case(When(pay_status=CashbookEntry.DEBIT, then=F("amount")), output_field=money)),
            Value(ZERO, output_field=money),
        ),
    )

    return q2(q2(totals["credit_total"]) - q2(totals["debit_total"]))


def sub_head_balances() -> Dict[str, Dict[str, Decimal]]:
    """
    {sub_head: {"credit": ..., "debit": ...}} over active accounts.

    Every sub-head is present. A balance >= 0 adds to credit, otherwise its
    magnitude adds to debit. Zero-balance accounts count (and add nothing).
    """
    result = {
        code: {"credit": ZERO, "debit": ZERO, "accounts": 0}
        for code, _label in Account.SUB_HEADS
    }

    accounts = ledger_store.list_active_accounts()
    balances = account_balances(accounts)

    for acc in accounts:
        bucket = result.setdefault(acc.sub_head, {"credit": ZERO, "debit": ZERO, "accounts": 0})
        credit, debit = split_balance(balances[acc.id])
        bucket["credit"] = q2(bucket["credit"] + credit)
        bucket["debit"] = q2(bucket["debit"] + debit)
        bucket["accounts"] += 1

    return result


def running_balances_for_account(account: Account) -> List[tuple]:
    """
    [(LedgerEntry, balance_after), ...] across the full live history.
    """
    return running_balances(
        opening_balance=account.signed_opening_balance,
        entries=ledger_store.query_entries(account.id),
    )
