# accounting/transactions.py

"""
PATH: accounting/transactions.py

POSTABLE TRANSACTIONS (FRAMEWORK-AGNOSTIC)

Every business document that touches the ledger is described by exactly one
of these frozen values. Posting rules dispatch on the concrete type.

Direction rules:
- CashbookTx: side follows pay_status (CREDIT → credit_amount, DEBIT → debit_amount)
- ExportTx:   CREDIT (money owed to us by the export party)
- ImportTx:   DEBIT  (money we owe the supplier)
- InvoiceTx:  DEBIT  (same as import)

Reference:
- (reference_type, reference_id) identifies the source document; at most one
  live ledger posting may exist per reference.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

MONEY_QUANT = Decimal("0.01")

CREDIT = "CREDIT"
DEBIT = "DEBIT"

REF_CASHBOOK = "CASHBOOK"
REF_IMPORT = "IMPORT"
REF_EXPORT = "EXPORT"
REF_INVOICE = "INVOICE"


class TransactionError(ValueError):
    """Raised when a transaction value cannot be built."""


def to_money(value) -> Decimal:
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise TransactionError(f"Invalid amount: {value!r}") from e

    if not d.is_finite():
        raise TransactionError(f"Invalid amount: {value!r}")

    return d.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CashbookTx:
    id: str
    account_id: int
    entry_date: date
    pay_status: str
    amount: Decimal
    detail: str = ""
    remarks: str = ""


@dataclass(frozen=True)
class ImportTx:
    id: str
    account_id: int
    entry_date: date
    amount: Decimal
    detail: str = ""
    remarks: str = ""


@dataclass(frozen=True)
class ExportTx:
    id: str
    account_id: int
    entry_date: date
    amount: Decimal
    detail: str = ""
    remarks: str = ""


@dataclass(frozen=True)
class InvoiceTx:
    id: str
    account_id: int
    entry_date: date
    amount: Decimal
    detail: str = ""
    remarks: str = ""


Transaction = Union[CashbookTx, ImportTx, ExportTx, InvoiceTx]
TradeTransaction = Union[ImportTx, ExportTx, InvoiceTx]


def reference_type_of(tx: Transaction) -> str:
    match tx:
        case CashbookTx():
            return REF_CASHBOOK
        case ImportTx():
            return REF_IMPORT
        case ExportTx():
            return REF_EXPORT
        case InvoiceTx():
            return REF_INVOICE
    raise TransactionError(f"Unsupported transaction type: {type(tx).__name__}")


def posting_side(tx: Transaction) -> str:
    match tx:
        case CashbookTx(pay_status=status):
            status = (status or "").strip().upper()
            if status not in (CREDIT, DEBIT):
                raise TransactionError(f"pay_status must be CREDIT or DEBIT, got {tx.pay_status!r}")
            return status
        case ExportTx():
            return CREDIT
        case ImportTx() | InvoiceTx():
            return DEBIT
    raise TransactionError(f"Unsupported transaction type: {type(tx).__name__}")
