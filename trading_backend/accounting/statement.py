# accounting/statement.py

"""
PATH: accounting/statement.py

RUNNING-BALANCE FOLD (FRAMEWORK-AGNOSTIC)

Sign convention:
- credit is positive, debit is negative
- a balance >= 0 reads as Credit ("Cr"); < 0 reads as Debit ("Dr")
- zero is Credit

The fold takes entries already ordered by (entry_date, created_at, id) and
never reorders them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

LABEL_CREDIT = "Cr"
LABEL_DEBIT = "Dr"


def q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def signed_opening(*, opening_balance, balance_status: str) -> Decimal:
    amount = q2(opening_balance)
    return amount if balance_status == "CREDIT" else -amount


def signed_amount(*, credit_amount, debit_amount) -> Decimal:
    return q2(credit_amount) - q2(debit_amount)


def balance_label(balance: Decimal) -> str:
    return LABEL_CREDIT if balance >= 0 else LABEL_DEBIT


def split_balance(balance: Decimal) -> Tuple[Decimal, Decimal]:
    """(credit_part, debit_part) of a signed balance; both non-negative."""
    if balance >= 0:
        return q2(balance), ZERO
    return ZERO, q2(-balance)


@dataclass(frozen=True)
class StatementRow:
    entry_id: int
    entry_date: date
    created_at: Optional[datetime]
    credit: Decimal
    debit: Decimal
    balance: Decimal
    detail: str = ""
    reference_type: str = ""
    reference_id: str = ""
    remarks: str = ""

    @property
    def label(self) -> str:
        return balance_label(self.balance)


@dataclass(frozen=True)
class LedgerStatement:
    account_id: int
    from_date: date
    to_date: date
    opening_balance: Decimal
    rows: Tuple[StatementRow, ...] = field(default_factory=tuple)
    total_credit: Decimal = ZERO
    total_debit: Decimal = ZERO

    @property
    def closing_balance(self) -> Decimal:
        if self.rows:
            return self.rows[-1].balance
        return self.opening_balance

    @property
    def opening_label(self) -> str:
        return balance_label(self.opening_balance)

    @property
    def closing_label(self) -> str:
        return balance_label(self.closing_balance)


def fold_statement(
    *,
    account_id: int,
    from_date: date,
    to_date: date,
    opening_balance: Decimal,
    entries: Iterable,
) -> LedgerStatement:
    """
    Build a statement from ordered entries.

    `entries` are objects exposing id, entry_date, created_at, credit_amount,
    debit_amount, detail, reference_type, reference_id, remarks.
    """
    running = q2(opening_balance)
    total_credit = ZERO
    total_debit = ZERO
    rows: List[StatementRow] = []

    for e in entries:
        credit = q2(e.credit_amount)
        debit = q2(e.debit_amount)
        running = q2(running + credit - debit)
        total_credit += credit
        total_debit += debit

        rows.append(
            StatementRow(
                entry_id=e.id,
                entry_date=e.entry_date,
                created_at=getattr(e, "created_at", None),
                credit=credit,
                debit=debit,
                balance=running,
                detail=getattr(e, "detail", "") or "",
                reference_type=getattr(e, "reference_type", "") or "",
                reference_id=getattr(e, "reference_id", "") or "",
                remarks=getattr(e, "remarks", "") or "",
            )
        )

    return LedgerStatement(
        account_id=account_id,
        from_date=from_date,
        to_date=to_date,
        opening_balance=q2(opening_balance),
        rows=tuple(rows),
        total_credit=q2(total_credit),
        total_debit=q2(total_debit),
    )


def running_balances(*, opening_balance: Decimal, entries: Iterable) -> List[Tuple[object, Decimal]]:
    """[(entry, balance_after_entry), ...] for ordered entries."""
    running = q2(opening_balance)
    out = []
    for e in entries:
        running = q2(running + q2(e.credit_amount) - q2(e.debit_amount))
        out.append((e, running))
    return out
