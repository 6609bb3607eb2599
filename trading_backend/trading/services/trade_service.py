# PATH: trading/services/trade_service.py

"""
======================================================
PATH: trading/services/trade_service.py
======================================================
TRADE DOCUMENT SERVICE (IMPORT / EXPORT / INVOICE)

Canonical flow (create):
1) Validate payload + derive total_weight / amount
2) Allocate invoice number (IMP### / HAH### / INV###) unless supplied
3) Save the document
4) Post to ledger (export → CREDIT, import / invoice → DEBIT)

Edit:   save new figures, then reverse + repost in the same transaction
Delete: soft-delete the document, then reverse its posting

Any posting failure rolls back the document write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Type

from django.core.exceptions import ValidationError
from django.db import transaction

from accounting.models.activity import ActivityLog
from accounting.models.ledger import LedgerEntry
from accounting.services import ledger_store
from accounting.services.activity_log_service import log_activity
from accounting.services.balance_cache import refresh_account_balance
from accounting.services.posting_rules import (
    post_invoice_or_import_transaction,
    repost_transaction,
    reverse_posting,
)
from accounting.transactions import ExportTx, ImportTx, InvoiceTx
from trading import calculations
from trading.models import ExportEntry, ImportEntry, InvoiceEntry, TradeEntry
from trading.services.exceptions import TradeEntryError, TradeEntryNotFoundError
from trading.services.master_data_service import normalize_vehicle_numbers, resolve_product

logger = logging.getLogger(__name__)

KIND_IMPORT = "import"
KIND_EXPORT = "export"
KIND_INVOICE = "invoice"


@dataclass(frozen=True)
class TradeKind:
    name: str
    model: Type[TradeEntry]
    prefix: str
    tx_class: Callable
    reference_type: str
    activity_entity: str
    fields: tuple


COMMON_FIELDS = (
    "entry_date",
    "bags_qty",
    "weight_per_bag",
    "rate_per_kg",
    "vehicle_numbers",
    "product",
    "invoice_no",
    "remarks",
)

KINDS: Dict[str, TradeKind] = {
    KIND_IMPORT: TradeKind(
        name=KIND_IMPORT,
        model=ImportEntry,
        prefix="IMP",
        tx_class=ImportTx,
        reference_type=LedgerEntry.REF_IMPORT,
        activity_entity=ActivityLog.ENTITY_IMPORT,
        fields=COMMON_FIELDS + ("supplier", "grn_no"),
    ),
    KIND_EXPORT: TradeKind(
        name=KIND_EXPORT,
        model=ExportEntry,
        prefix="HAH",
        tx_class=ExportTx,
        reference_type=LedgerEntry.REF_EXPORT,
        activity_entity=ActivityLog.ENTITY_EXPORT,
        fields=COMMON_FIELDS + ("gd_no",),
    ),
    KIND_INVOICE: TradeKind(
        name=KIND_INVOICE,
        model=InvoiceEntry,
        prefix="INV",
        tx_class=InvoiceTx,
        reference_type=LedgerEntry.REF_INVOICE,
        activity_entity=ActivityLog.ENTITY_INVOICE,
        fields=COMMON_FIELDS
        + ("supplier", "grn_no", "weight_unit")
        + calculations.ADJUSTMENT_FIELDS,
    ),
}


def get_kind(kind: str) -> TradeKind:
    try:
        return KINDS[(kind or "").strip().lower()]
    except KeyError as exc:
        raise TradeEntryError(f"Unknown document kind {kind!r}; use import, export or invoice") from exc


def next_invoice_number(kind: str) -> str:
    k = get_kind(kind)
    existing = k.model.objects.filter(invoice_no__startswith=k.prefix).values_list("invoice_no", flat=True)
    return calculations.next_number(k.prefix, existing)


def get_entry(kind: str, entry_id, *, for_update: bool = False) -> TradeEntry:
    k = get_kind(kind)
    qs = k.model.objects.select_related("account", "product").filter(is_deleted=False)
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=int(entry_id))
    except (k.model.DoesNotExist, TypeError, ValueError) as exc:
        raise TradeEntryNotFoundError(f"{k.name.title()} entry {entry_id} not found") from exc


def _apply_figures(k: TradeKind, entry: TradeEntry) -> None:
    try:
        if k.name == KIND_INVOICE:
            figures = calculations.invoice_figures(
                weight_unit=entry.weight_unit,
                bags_qty=entry.bags_qty,
                weight_per_bag=entry.weight_per_bag,
                rate_per_kg=entry.rate_per_kg,
                adjustments={f: getattr(entry, f) for f in calculations.ADJUSTMENT_FIELDS},
            )
        else:
            figures = calculations.goods_figures(
                bags_qty=entry.bags_qty,
                weight_per_bag=entry.weight_per_bag,
                rate_per_kg=entry.rate_per_kg,
            )
    except calculations.TradeCalculationError as exc:
        raise TradeEntryError(str(exc)) from exc

    entry.total_weight = figures.total_weight
    entry.amount = figures.amount


def _tx_for(k: TradeKind, entry: TradeEntry):
    counterparty = getattr(entry, "supplier", "") or (entry.product.name if entry.product_id else "")
    detail = f"{k.name.title()} {entry.invoice_no}"
    if counterparty:
        detail = f"{detail} - {counterparty}"

    return k.tx_class(
        id=str(entry.id),
        account_id=entry.account_id,
        entry_date=entry.entry_date,
        amount=entry.amount,
        detail=detail,
        remarks=entry.remarks,
    )


def _save(entry: TradeEntry) -> None:
    try:
        entry.save()
    except ValidationError as exc:
        raise TradeEntryError("; ".join(exc.messages)) from exc


def _snapshot(entry: TradeEntry) -> dict:
    return {
        "account_id": entry.account_id,
        "invoice_no": entry.invoice_no,
        "product_id": entry.product_id,
        "vehicle_numbers": entry.vehicle_numbers,
        "amount": str(entry.amount),
        "total_weight": str(entry.total_weight),
        "entry_date": entry.entry_date.isoformat(),
    }


def _resolve_master_data(data: dict) -> None:
    if "product" in data:
        data["product"] = resolve_product(data["product"])
    if "vehicle_numbers" in data:
        data["vehicle_numbers"] = normalize_vehicle_numbers(data["vehicle_numbers"])


@transaction.atomic
def create_trade_entry(kind: str, *, account_id, user=None, **data) -> TradeEntry:
    k = get_kind(kind)

    unknown = set(data) - set(k.fields)
    if unknown:
        raise TradeEntryError(f"Unknown {k.name} fields: {', '.join(sorted(unknown))}")

    _resolve_master_data(data)
    account = ledger_store.get_active_account(account_id, for_update=True)

    if not (data.get("invoice_no") or "").strip():
        data["invoice_no"] = next_invoice_number(k.name)

    entry = k.model(account=account, **{f: v for f, v in data.items() if v is not None})
    _apply_figures(k, entry)
    _save(entry)

    post_invoice_or_import_transaction(_tx_for(k, entry))

    logger.info(
        "Trade entry created",
        extra={
            "kind": k.name,
            "entry_id": entry.id,
            "invoice_no": entry.invoice_no,
            "account_id": account.id,
            "amount": str(entry.amount),
        },
    )
    log_activity(
        action=ActivityLog.CREATE,
        entity=k.activity_entity,
        entity_id=entry.id,
        description=f"{k.name.title()} {entry.invoice_no} for {account.account_name}: {entry.amount}",
        user=user,
        metadata=_snapshot(entry),
    )
    return entry


@transaction.atomic
def update_trade_entry(kind: str, entry_id, *, account_id=None, user=None, **data) -> TradeEntry:
    k = get_kind(kind)

    unknown = set(data) - set(k.fields)
    if unknown:
        raise TradeEntryError(f"Unknown {k.name} fields: {', '.join(sorted(unknown))}")

    entry = get_entry(k.name, entry_id, for_update=True)
    before = _snapshot(entry)
    _resolve_master_data(data)

    if account_id is not None and int(account_id) != entry.account_id:
        ledger_store.lock_accounts([entry.account_id, account_id])
        entry.account = ledger_store.get_active_account(account_id, for_update=True)

    for name, value in data.items():
        if name == "invoice_no" and not (value or "").strip():
            continue
        setattr(entry, name, value)

    _apply_figures(k, entry)
    _save(entry)

    repost_transaction(_tx_for(k, entry))

    if before["account_id"] != entry.account_id:
        refresh_account_balance(before["account_id"])

    logger.info(
        "Trade entry updated",
        extra={"kind": k.name, "entry_id": entry.id, "amount": str(entry.amount)},
    )
    log_activity(
        action=ActivityLog.UPDATE,
        entity=k.activity_entity,
        entity_id=entry.id,
        description=f"{k.name.title()} {entry.invoice_no} updated",
        user=user,
        metadata={"before": before, "after": _snapshot(entry)},
    )
    return entry


@transaction.atomic
def delete_trade_entry(kind: str, entry_id, *, user=None) -> None:
    k = get_kind(kind)
    entry = get_entry(k.name, entry_id, for_update=True)

    entry.is_deleted = True
    _save(entry)

    reversed_count = reverse_posting(k.reference_type, entry.id)
    if reversed_count != 1:
        logger.warning(
            "Trade entry deleted with unexpected posting count",
            extra={"kind": k.name, "entry_id": entry.id, "reversed": reversed_count},
        )

    log_activity(
        action=ActivityLog.DELETE,
        entity=k.activity_entity,
        entity_id=entry.id,
        description=f"{k.name.title()} {entry.invoice_no} deleted",
        user=user,
        metadata=_snapshot(entry),
    )


def list_trade_entries(
    kind: str,
    *,
    from_date=None,
    to_date=None,
    account_id=None,
    search: Optional[str] = None,
):
    k = get_kind(kind)
    qs = k.model.objects.select_related("account", "product").filter(is_deleted=False)
    if from_date is not None:
        qs = qs.filter(entry_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(entry_date__lte=to_date)
    if account_id is not None:
        qs = qs.filter(account_id=account_id)
    if search:
        qs = qs.filter(invoice_no__icontains=search.strip())
    return qs.order_by("-entry_date", "-created_at", "-id")
