# accounting/services/report_service.py

"""
REPORT SERVICE

Thin formatters over the balance engine and the cashbook.

Guarantees:
- No balance arithmetic of its own beyond totals of already-computed values
- Returns JSON-safe structures (money as 2dp strings, dates as ISO strings)
- A failing balance computation fails the report; no partial or zero fallbacks
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from accounting.models.account import Account
from accounting.models.cashbook import CashbookEntry
from accounting.services import balance_service, ledger_store
from accounting.services.exceptions import InvalidQueryError, InvalidRangeError
from accounting.statement import ZERO, LedgerStatement, balance_label, q2, split_balance

REPORT_TYPES = ("all", "credit", "debit")


def money(v) -> str:
    return f"{q2(v):.2f}"


def _check_range(from_date: Optional[date], to_date: Optional[date]) -> None:
    if from_date is not None and to_date is not None and from_date > to_date:
        raise InvalidRangeError("from_date must be on or before to_date")


# ============================================================
# LEDGER STATEMENT
# ============================================================


def statement_as_dict(statement: LedgerStatement) -> dict:
    return {
        "account_id": statement.account_id,
        "from_date": statement.from_date.isoformat(),
        "to_date": statement.to_date.isoformat(),
        "opening_balance": money(statement.opening_balance),
        "opening_label": statement.opening_label,
        "rows": [
            {
                "id": row.entry_id,
                "entry_date": row.entry_date.isoformat(),
                "detail": row.detail,
                "reference_type": row.reference_type,
                "reference_id": row.reference_id,
                "remarks": row.remarks,
                "credit": money(row.credit),
                "debit": money(row.debit),
                "balance": money(row.balance),
                "label": row.label,
            }
            for row in statement.rows
        ],
        "total_credit": money(statement.total_credit),
        "total_debit": money(statement.total_debit),
        "closing_balance": money(statement.closing_balance),
        "closing_label": statement.closing_label,
    }


def ledger_report(account_id, *, from_date: date, to_date: date) -> dict:
    account = ledger_store.get_account(account_id)
    statement = balance_service.ledger_statement(account.id, from_date=from_date, to_date=to_date)

    data = statement_as_dict(statement)
    data["account_name"] = account.account_name
    data["sub_head"] = account.sub_head
    return data


# ============================================================
# ACCOUNT BALANCES
# ============================================================


def accounts_balance_report(*, sub_head: Optional[str] = None, as_of: Optional[date] = None) -> dict:
    """
    Active accounts with a non-zero balance.

    total_credit = Σ positive balances, total_debit = Σ |negative balances|.
    """
    accounts = ledger_store.list_active_accounts()
    if sub_head:
        accounts = [a for a in accounts if a.sub_head == sub_head]

    balances = balance_service.account_balances(accounts, as_of=as_of)

    rows = []
    total_credit = ZERO
    total_debit = ZERO
    for acc in accounts:
        bal = balances[acc.id]
        if bal == 0:
            continue

        credit, debit = split_balance(bal)
        total_credit += credit
        total_debit += debit

        rows.append(
            {
                "account_id": acc.id,
                "account_name": acc.account_name,
                "sub_head": acc.sub_head,
                "credit": money(credit),
                "debit": money(debit),
                "balance": money(bal),
                "label": balance_label(bal),
            }
        )

    net = q2(total_credit - total_debit)
    return {
        "as_of": as_of.isoformat() if as_of else None,
        "rows": rows,
        "total_credit": money(total_credit),
        "total_debit": money(total_debit),
        "net_balance": money(net),
        "net_label": balance_label(net),
    }


def sub_head_balance_report() -> dict:
    buckets = balance_service.sub_head_balances()
    labels = dict(Account.SUB_HEADS)

    rows = []
    total_credit = ZERO
    total_debit = ZERO
    for code, _label in Account.SUB_HEADS:
        bucket = buckets[code]
        total_credit += bucket["credit"]
        total_debit += bucket["debit"]
        rows.append(
            {
                "sub_head": code,
                "label": labels[code],
                "accounts": bucket["accounts"],
                "credit": money(bucket["credit"]),
                "debit": money(bucket["debit"]),
            }
        )

    return {
        "rows": rows,
        "total_credit": money(total_credit),
        "total_debit": money(total_debit),
    }


# ============================================================
# CASHBOOK REPORTS
# ============================================================


def _cashbook_row(entry: CashbookEntry) -> dict:
    is_credit = entry.pay_status == CashbookEntry.CREDIT
    return {
        "id": entry.id,
        "entry_date": entry.entry_date.isoformat(),
        "account_id": entry.account_id,
        "account_name": entry.account.account_name,
        "pay_status": entry.pay_status,
        "payment_detail": entry.payment_detail,
        "remarks": entry.remarks,
        "credit": money(entry.amount if is_credit else ZERO),
        "debit": money(entry.amount if not is_credit else ZERO),
        "balance_after": money(entry.balance_after),
    }


def _cashbook_qs(*, from_date, to_date):
    _check_range(from_date, to_date)
    qs = CashbookEntry.objects.select_related("account").filter(is_deleted=False)
    if from_date is not None:
        qs = qs.filter(entry_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(entry_date__lte=to_date)
    return qs.order_by("entry_date", "created_at", "id")


def _totals(entries) -> tuple[Decimal, Decimal]:
    credit = ZERO
    debit = ZERO
    for e in entries:
        if e.pay_status == CashbookEntry.CREDIT:
            credit += e.amount
        else:
            debit += e.amount
    return q2(credit), q2(debit)


def credit_debit_report(
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    report_type: str = "all",
) -> dict:
    report_type = (report_type or "all").strip().lower()
    if report_type not in REPORT_TYPES:
        raise InvalidQueryError(f"type must be one of {', '.join(REPORT_TYPES)}")

    qs = _cashbook_qs(from_date=from_date, to_date=to_date)
    if report_type == "credit":
        qs = qs.filter(pay_status=CashbookEntry.CREDIT)
    elif report_type == "debit":
        qs = qs.filter(pay_status=CashbookEntry.DEBIT)

    entries = list(qs)
    credit, debit = _totals(entries)

    return {
        "from_date": from_date.isoformat() if from_date else None,
        "to_date": to_date.isoformat() if to_date else None,
        "type": report_type,
        "rows": [_cashbook_row(e) for e in entries],
        "total_credit": money(credit),
        "total_debit": money(debit),
    }


def cashbook_report(
    account_id,
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    account = ledger_store.get_account(account_id)
    entries = list(_cashbook_qs(from_date=from_date, to_date=to_date).filter(account_id=account.id))
    credit, debit = _totals(entries)
    net = q2(credit - debit)

    return {
        "account_id": account.id,
        "account_name": account.account_name,
        "from_date": from_date.isoformat() if from_date else None,
        "to_date": to_date.isoformat() if to_date else None,
        "rows": [_cashbook_row(e) for e in entries],
        "total_credit": money(credit),
        "total_debit": money(debit),
        "balance": money(net),
        "label": balance_label(net),
    }


def cash_in_hand_report(*, from_date: Optional[date] = None, to_date: Optional[date] = None) -> dict:
    cash = balance_service.cash_in_hand(from_date=from_date, to_date=to_date)
    return {
        "from_date": from_date.isoformat() if from_date else None,
        "to_date": to_date.isoformat() if to_date else None,
        "cash_in_hand": money(cash),
        "label": balance_label(cash),
    }
