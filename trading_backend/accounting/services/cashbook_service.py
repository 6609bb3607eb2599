# PATH: accounting/services/cashbook_service.py

"""
CASHBOOK SERVICE

Responsibilities:
- Validate cashbook payloads
- Create / edit / delete CashbookEntry business records
- Keep exactly one live ledger posting per live entry (via posting_rules)
- Refresh balance_after / current_balance caches in the same transaction

Accounting Effect:
- CREDIT: Cr <account>
- DEBIT:  Dr <account>
"""

from __future__ import annotations

import logging
from datetime import date as date_type
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.db import transaction
from django.utils import timezone

from accounting.models.activity import ActivityLog
from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry
from accounting.services import ledger_store
from accounting.services.activity_log_service import log_activity
from accounting.services.balance_cache import refresh_account_balance
from accounting.services.exceptions import EntryNotFoundError, PostingRuleError
from accounting.services.posting_rules import (
    post_cashbook_entry,
    repost_transaction,
    reverse_posting,
)
from accounting.transactions import CashbookTx

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _normalize_entry_date(entry_date) -> date_type:
    if entry_date is None:
        return timezone.localdate()
    if isinstance(entry_date, date_type):
        return entry_date
    raise PostingRuleError("entry_date must be a date")


def _normalize_pay_status(pay_status: str) -> str:
    status = (pay_status or "").strip().upper()
    if status not in (CashbookEntry.CREDIT, CashbookEntry.DEBIT):
        raise PostingRuleError("pay_status must be CREDIT or DEBIT")
    return status


def _tx_for(entry: CashbookEntry) -> CashbookTx:
    return CashbookTx(
        id=str(entry.id),
        account_id=entry.account_id,
        entry_date=entry.entry_date,
        pay_status=entry.pay_status,
        amount=entry.amount,
        detail=entry.payment_detail or f"Cashbook {entry.pay_status.title()}",
        remarks=entry.remarks,
    )


def get_entry(entry_id, *, for_update: bool = False) -> CashbookEntry:
    qs = CashbookEntry.objects.select_related("account").filter(is_deleted=False)
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=int(entry_id))
    except (CashbookEntry.DoesNotExist, TypeError, ValueError) as exc:
        raise EntryNotFoundError(f"Cashbook entry {entry_id} not found") from exc


@transaction.atomic
def create_cashbook_entry(
    *,
    account_id,
    amount,
    pay_status: str,
    entry_date=None,
    payment_detail: str = "",
    remarks: str = "",
    user=None,
) -> CashbookEntry:
    amt = _money(amount)
    if amt <= Decimal("0.00"):
        raise PostingRuleError("Amount must be > 0")

    status = _normalize_pay_status(pay_status)
    account = ledger_store.get_active_account(account_id, for_update=True)

    entry = CashbookEntry.objects.create(
        account=account,
        entry_date=_normalize_entry_date(entry_date),
        pay_status=status,
        amount=amt,
        payment_detail=(payment_detail or "").strip(),
        remarks=(remarks or "").strip(),
    )

    post_cashbook_entry(_tx_for(entry))
    entry.refresh_from_db()

    logger.info(
        "Cashbook entry created",
        extra={"cashbook_entry_id": entry.id, "account_id": account.id, "amount": str(amt)},
    )
    log_activity(
        action=ActivityLog.CREATE,
        entity=ActivityLog.ENTITY_CASHBOOK,
        entity_id=entry.id,
        description=f"{status.title()} {amt} for {account.account_name}",
        user=user,
        metadata={"account_id": account.id, "pay_status": status, "amount": str(amt)},
    )
    return entry


_UNSET = object()


@transaction.atomic
def update_cashbook_entry(
    entry_id,
    *,
    account_id=_UNSET,
    amount=_UNSET,
    pay_status=_UNSET,
    entry_date=_UNSET,
    payment_detail=_UNSET,
    remarks=_UNSET,
    user=None,
) -> CashbookEntry:
    """
    Edit = reverse the old posting + write the new one, atomically.
    Fields left unset keep their current value.
    """
    entry = get_entry(entry_id, for_update=True)
    before = {
        "account_id": entry.account_id,
        "pay_status": entry.pay_status,
        "amount": str(entry.amount),
        "entry_date": entry.entry_date.isoformat(),
    }

    if account_id is not _UNSET:
        ledger_store.lock_accounts([entry.account_id, account_id])
        entry.account = ledger_store.get_active_account(account_id, for_update=True)
    if amount is not _UNSET:
        amt = _money(amount)
        if amt <= Decimal("0.00"):
            raise PostingRuleError("Amount must be > 0")
        entry.amount = amt
    if pay_status is not _UNSET:
        entry.pay_status = _normalize_pay_status(pay_status)
    if entry_date is not _UNSET:
        entry.entry_date = _normalize_entry_date(entry_date)
    if payment_detail is not _UNSET:
        entry.payment_detail = (payment_detail or "").strip()
    if remarks is not _UNSET:
        entry.remarks = (remarks or "").strip()

    entry.save()

    repost_transaction(_tx_for(entry))

    if before["account_id"] != entry.account_id:
        refresh_account_balance(before["account_id"])

    entry.refresh_from_db()

    logger.info(
        "Cashbook entry updated",
        extra={"cashbook_entry_id": entry.id, "account_id": entry.account_id},
    )
    log_activity(
        action=ActivityLog.UPDATE,
        entity=ActivityLog.ENTITY_CASHBOOK,
        entity_id=entry.id,
        description=f"Cashbook entry {entry.id} updated",
        user=user,
        metadata={
            "before": before,
            "after": {
                "account_id": entry.account_id,
                "pay_status": entry.pay_status,
                "amount": str(entry.amount),
                "entry_date": entry.entry_date.isoformat(),
            },
        },
    )
    return entry


@transaction.atomic
def delete_cashbook_entry(entry_id, *, user=None) -> None:
    entry = get_entry(entry_id, for_update=True)

    entry.is_deleted = True
    entry.save(update_fields=["is_deleted", "updated_at"])

    reversed_count = reverse_posting(LedgerEntry.REF_CASHBOOK, entry.id)
    if reversed_count != 1:
        logger.warning(
            "Cashbook entry deleted with unexpected posting count",
            extra={"cashbook_entry_id": entry.id, "reversed": reversed_count},
        )

    log_activity(
        action=ActivityLog.DELETE,
        entity=ActivityLog.ENTITY_CASHBOOK,
        entity_id=entry.id,
        description=f"Cashbook entry {entry.id} deleted ({entry.pay_status.title()} {entry.amount})",
        user=user,
        metadata={"account_id": entry.account_id, "amount": str(entry.amount)},
    )


def list_cashbook_entries(
    *,
    from_date: Optional[date_type] = None,
    to_date: Optional[date_type] = None,
    account_id=None,
    pay_status: Optional[str] = None,
):
    qs = CashbookEntry.objects.select_related("account").filter(is_deleted=False)
    if from_date is not None:
        qs = qs.filter(entry_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(entry_date__lte=to_date)
    if account_id is not None:
        qs = qs.filter(account_id=account_id)
    if pay_status:
        qs = qs.filter(pay_status=pay_status.strip().upper())
    return qs.order_by("entry_date", "created_at", "id")
