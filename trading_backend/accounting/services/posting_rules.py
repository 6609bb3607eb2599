# PATH: accounting/services/posting_rules.py

"""
POSTING RULES

Maps a business transaction to exactly one ledger posting.

Rules:
- Cashbook:  pay_status CREDIT → credit_amount, DEBIT → debit_amount
- Export:    CREDIT
- Import:    DEBIT
- Invoice:   DEBIT
- reference_type/reference_id identify the source document; a second live
  posting for the same reference is refused
- Edits are reverse + write in one transaction; a failure rolls back both
- Every write refreshes the balance cache of each affected account before
  the transaction commits

Lifecycle per source document:
    (none) --post--> POSTED --repost--> POSTED (old reversed) --reverse--> REVERSED
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Set

from django.db import transaction

from accounting.models.ledger import LedgerEntry
from accounting.services import ledger_store
from accounting.services.balance_cache import refresh_account_balance
from accounting.services.exceptions import PostingRuleError
from accounting.transactions import (
    CREDIT,
    CashbookTx,
    ExportTx,
    ImportTx,
    InvoiceTx,
    Transaction,
    TransactionError,
    posting_side,
    reference_type_of,
    to_money,
)

logger = logging.getLogger("ledger")


def _validated_amount(tx: Transaction) -> Decimal:
    try:
        amount = to_money(tx.amount)
    except TransactionError as exc:
        raise PostingRuleError(str(exc)) from exc

    if amount <= Decimal("0.00"):
        raise PostingRuleError(f"Posting amount must be > 0 (got {amount})")
    return amount


def _default_detail(tx: Transaction, reference_type: str) -> str:
    return f"{reference_type.title()} #{tx.id}"


def _write_posting(tx: Transaction) -> LedgerEntry:
    try:
        reference_type = reference_type_of(tx)
        side = posting_side(tx)
    except TransactionError as exc:
        raise PostingRuleError(str(exc)) from exc

    reference_id = str(tx.id or "").strip()
    if not reference_id:
        raise PostingRuleError("Transaction id is required for posting")

    amount = _validated_amount(tx)

    account = ledger_store.get_active_account(tx.account_id, for_update=True)

    if ledger_store.active_entries_for_reference(reference_type, reference_id):
        logger.error(
            "Duplicate posting refused",
            extra={"reference_type": reference_type, "reference_id": reference_id},
        )
        raise PostingRuleError(
            f"{reference_type} {reference_id} already has a live ledger posting"
        )

    entry = ledger_store.insert_entry(
        account_id=account.id,
        entry_date=tx.entry_date,
        credit_amount=amount if side == CREDIT else Decimal("0.00"),
        debit_amount=amount if side != CREDIT else Decimal("0.00"),
        detail=tx.detail or _default_detail(tx, reference_type),
        reference_type=reference_type,
        reference_id=reference_id,
        remarks=tx.remarks,
    )

    logger.info(
        "Ledger posting created",
        extra={
            "reference_type": reference_type,
            "reference_id": reference_id,
            "account_id": account.id,
            "side": side,
            "amount": str(amount),
        },
    )
    return entry


def _reverse(reference_type: str, reference_id) -> tuple[int, Set[int]]:
    reversed_count = 0
    affected: Set[int] = set()
    for entry in ledger_store.active_entries_for_reference(reference_type, reference_id):
        ledger_store.soft_delete_entry(entry.id)
        affected.add(entry.account_id)
        reversed_count += 1

        logger.info(
            "Ledger posting reversed",
            extra={
                "reference_type": reference_type,
                "reference_id": str(reference_id),
                "ledger_entry_id": entry.id,
                "account_id": entry.account_id,
                "amount": str(entry.amount),
            },
        )
    return reversed_count, affected


def _refresh(account_ids: Iterable[int]) -> None:
    for account_id in sorted(set(account_ids)):
        refresh_account_balance(account_id)


@transaction.atomic
def post_cashbook_entry(tx: CashbookTx) -> LedgerEntry:
    if not isinstance(tx, CashbookTx):
        raise PostingRuleError(f"Expected CashbookTx, got {type(tx).__name__}")

    entry = _write_posting(tx)
    _refresh([entry.account_id])
    return entry


@transaction.atomic
def post_invoice_or_import_transaction(tx: ImportTx | ExportTx | InvoiceTx) -> LedgerEntry:
    """
    EXPORT → CREDIT; IMPORT / INVOICE → DEBIT.
    """
    if not isinstance(tx, (ImportTx, ExportTx, InvoiceTx)):
        raise PostingRuleError(f"Expected a trade transaction, got {type(tx).__name__}")

    entry = _write_posting(tx)
    _refresh([entry.account_id])
    return entry


def post_transaction(tx: Transaction) -> LedgerEntry:
    match tx:
        case CashbookTx():
            return post_cashbook_entry(tx)
        case ImportTx() | ExportTx() | InvoiceTx():
            return post_invoice_or_import_transaction(tx)
    raise PostingRuleError(f"Unsupported transaction type: {type(tx).__name__}")


@transaction.atomic
def reverse_posting(reference_type: str, reference_id) -> int:
    """
    Soft-delete the live posting(s) for a reference. Returns how many were reversed.
    Reversing a reference with no live posting is a no-op.
    """
    if reference_type not in dict(LedgerEntry.REFERENCE_TYPES):
        raise PostingRuleError(f"Unknown reference_type: {reference_type!r}")

    reversed_count, affected = _reverse(reference_type, reference_id)
    _refresh(affected)
    return reversed_count


@transaction.atomic
def repost_transaction(tx: Transaction) -> LedgerEntry:
    """
    Edit flow: reverse the previous posting of tx's reference, then write the new one.
    """
    try:
        reference_type = reference_type_of(tx)
    except TransactionError as exc:
        raise PostingRuleError(str(exc)) from exc

    _count, affected = _reverse(reference_type, tx.id)
    entry = _write_posting(tx)

    affected.add(entry.account_id)
    _refresh(affected)
    return entry
