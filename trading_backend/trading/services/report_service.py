# trading/services/report_service.py

"""
TRADE REPORTS

- Vehicle-wise report: live documents grouped by vehicle number
- Product-wise report: live documents grouped by product
- Goods-received report: import entries in a date range with totals
- Document search by GD number / invoice number
- Daily dashboard totals (cashbook + trade + accounts)

Money values are returned as 2dp strings, weights as 3dp strings.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.cashbook import CashbookEntry
from accounting.services import balance_service
from accounting.services.activity_log_service import recent_activity
from accounting.services.exceptions import InvalidQueryError, InvalidRangeError
from accounting.services.report_service import money
from trading.models import ExportEntry, ImportEntry, InvoiceEntry
from trading.services.trade_service import KINDS

NO_VEHICLE = "No Vehicle"
NO_PRODUCT = "No Product"

ZERO = Decimal("0.00")


def _weight(v) -> str:
    return f"{Decimal(str(v or '0')):.3f}"


def _check_range(from_date: Optional[date], to_date: Optional[date]) -> None:
    if from_date is not None and to_date is not None and from_date > to_date:
        raise InvalidRangeError("from_date must be on or before to_date")


def _product_name(entry) -> str:
    return entry.product.name if entry.product_id else ""


def _doc_row(kind: str, entry) -> dict:
    return {
        "kind": kind,
        "id": entry.id,
        "invoice_no": entry.invoice_no,
        "entry_date": entry.entry_date.isoformat(),
        "account_id": entry.account_id,
        "account_name": entry.account.account_name,
        "counterparty": getattr(entry, "supplier", "") or _product_name(entry),
        "product_id": entry.product_id,
        "product_name": _product_name(entry),
        "gd_no": getattr(entry, "gd_no", ""),
        "grn_no": getattr(entry, "grn_no", ""),
        "vehicle_numbers": entry.vehicle_numbers,
        "bags_qty": _weight(entry.bags_qty),
        "total_weight": _weight(entry.total_weight),
        "amount": money(entry.amount),
    }


def _live_documents(k, *, from_date, to_date):
    qs = k.model.objects.select_related("account", "product").filter(is_deleted=False)
    if from_date is not None:
        qs = qs.filter(entry_date__gte=from_date)
    if to_date is not None:
        qs = qs.filter(entry_date__lte=to_date)
    return qs


def vehicle_wise_report(
    *,
    vehicle: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    """
    Group live trade documents by vehicle number.

    A document listing several vehicles ("LEA-123, QTA-9") appears under each.
    Documents without a vehicle are grouped under "No Vehicle".
    `vehicle` is a case-insensitive substring filter.
    """
    _check_range(from_date, to_date)
    needle = (vehicle or "").strip().upper()

    groups: "OrderedDict[str, dict]" = OrderedDict()

    for kind, k in KINDS.items():
        qs = _live_documents(k, from_date=from_date, to_date=to_date)
        if needle:
            qs = qs.filter(vehicle_numbers__icontains=needle)

        for entry in qs.order_by("entry_date", "created_at", "id"):
            vehicles = entry.vehicles or [NO_VEHICLE]
            if needle:
                vehicles = [v for v in vehicles if needle in v] or vehicles

            for v in vehicles:
                group = groups.setdefault(
                    v,
                    {"vehicle": v, "rows": [], "total_weight": Decimal("0"), "total_amount": ZERO},
                )
                group["rows"].append(_doc_row(kind, entry))
                group["total_weight"] += entry.total_weight
                group["total_amount"] += entry.amount

    out = []
    for v in sorted(groups, key=lambda name: (name == NO_VEHICLE, name)):
        g = groups[v]
        g["rows"].sort(key=lambda r: (r["entry_date"], r["kind"], r["id"]))
        out.append(
            {
                "vehicle": g["vehicle"],
                "documents": len(g["rows"]),
                "total_weight": _weight(g["total_weight"]),
                "total_amount": money(g["total_amount"]),
                "rows": g["rows"],
            }
        )

    return {
        "vehicle": vehicle or None,
        "from_date": from_date.isoformat() if from_date else None,
        "to_date": to_date.isoformat() if to_date else None,
        "groups": out,
    }


def product_wise_report(
    *,
    product_id: Optional[int] = None,
    kind: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> dict:
    """
    Group live trade documents by product, with weight / amount totals.

    Documents without a product are grouped last under "No Product".
    """
    _check_range(from_date, to_date)
    if kind and kind not in KINDS:
        raise InvalidQueryError(f"Unknown document kind {kind!r}; use import, export or invoice")

    groups: "OrderedDict[object, dict]" = OrderedDict()

    for name, k in KINDS.items():
        if kind and name != kind:
            continue

        qs = _live_documents(k, from_date=from_date, to_date=to_date)
        if product_id is not None:
            qs = qs.filter(product_id=product_id)

        for entry in qs.order_by("entry_date", "created_at", "id"):
            group = groups.setdefault(
                entry.product_id,
                {
                    "product_id": entry.product_id,
                    "product_name": _product_name(entry) or NO_PRODUCT,
                    "rows": [],
                    "total_weight": Decimal("0"),
                    "total_amount": ZERO,
                },
            )
            group["rows"].append(_doc_row(name, entry))
            group["total_weight"] += entry.total_weight
            group["total_amount"] += entry.amount

    out = []
    for g in sorted(groups.values(), key=lambda g: (g["product_id"] is None, g["product_name"])):
        g["rows"].sort(key=lambda r: (r["entry_date"], r["kind"], r["id"]))
        out.append(
            {
                "product_id": g["product_id"],
                "product_name": g["product_name"],
                "documents": len(g["rows"]),
                "total_weight": _weight(g["total_weight"]),
                "total_amount": money(g["total_amount"]),
                "rows": g["rows"],
            }
        )

    return {
        "product_id": product_id,
        "kind": kind or None,
        "from_date": from_date.isoformat() if from_date else None,
        "to_date": to_date.isoformat() if to_date else None,
        "groups": out,
    }


def goods_received_report(
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    account_id: Optional[int] = None,
) -> dict:
    """
    Live import (goods received) entries in range, newest first, with totals.

    The range defaults to the current month up to today.
    """
    today = timezone.localdate()
    from_date = from_date or today.replace(day=1)
    to_date = to_date or today
    _check_range(from_date, to_date)

    qs = _live_documents(KINDS["import"], from_date=from_date, to_date=to_date)
    if account_id is not None:
        qs = qs.filter(account_id=account_id)

    entries = list(qs.order_by("-entry_date", "-created_at", "-id"))
    total_weight = sum((e.total_weight for e in entries), Decimal("0"))
    total_amount = sum((e.amount for e in entries), ZERO)

    return {
        "from_date": from_date.isoformat(),
        "to_date": to_date.isoformat(),
        "account_id": account_id,
        "rows": [_doc_row("import", e) for e in entries],
        "count": len(entries),
        "total_bags": _weight(sum((e.bags_qty for e in entries), Decimal("0"))),
        "total_weight": _weight(total_weight),
        "total_amount": money(total_amount),
    }


def search_documents(*, gd_no: Optional[str] = None, invoice_no: Optional[str] = None) -> dict:
    gd_no = (gd_no or "").strip()
    invoice_no = (invoice_no or "").strip()
    if not gd_no and not invoice_no:
        raise InvalidQueryError("Provide gd_no or invoice_no")

    rows = []
    for kind, k in KINDS.items():
        cond = Q()
        if invoice_no:
            cond |= Q(invoice_no__icontains=invoice_no)
        if gd_no and hasattr(k.model, "gd_no"):
            cond |= Q(gd_no__icontains=gd_no)
        if not cond:
            continue

        qs = k.model.objects.select_related("account", "product").filter(is_deleted=False).filter(cond)
        rows.extend(_doc_row(kind, e) for e in qs.order_by("entry_date", "id"))

    return {"gd_no": gd_no or None, "invoice_no": invoice_no or None, "rows": rows}


def _trade_totals(model, day: date) -> dict:
    agg = model.objects.filter(is_deleted=False, entry_date=day).aggregate(
        count=Count("id"),
        total=Coalesce(Sum("amount"), ZERO),
    )
    return {"count": agg["count"], "total": money(agg["total"])}


def dashboard(*, day: Optional[date] = None) -> dict:
    """
    One day's activity at a glance. Cash in hand covers that day's cashbook only.
    """
    day = day or timezone.localdate()

    cashbook = CashbookEntry.objects.filter(is_deleted=False, entry_date=day).aggregate(
        count=Count("id"),
        credit=Coalesce(Sum("amount", filter=Q(pay_status=CashbookEntry.CREDIT)), ZERO),
        debit=Coalesce(Sum("amount", filter=Q(pay_status=CashbookEntry.DEBIT)), ZERO),
    )

    accounts = Account.objects.aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(is_active=True)),
    )

    return {
        "date": day.isoformat(),
        "cashbook": {
            "count": cashbook["count"],
            "credit": money(cashbook["credit"]),
            "debit": money(cashbook["debit"]),
            "cash_in_hand": money(balance_service.cash_in_hand(from_date=day, to_date=day)),
        },
        "imports": _trade_totals(ImportEntry, day),
        "exports": _trade_totals(ExportEntry, day),
        "invoices": _trade_totals(InvoiceEntry, day),
        "accounts": {
            "total": accounts["total"],
            "active": accounts["active"],
            "inactive": accounts["total"] - accounts["active"],
        },
        "recent_activity": [
            {
                "action": log.action,
                "entity": log.entity,
                "entity_id": log.entity_id,
                "description": log.description,
                "performed_by": log.performed_by,
                "created_at": log.created_at.isoformat(),
            }
            for log in recent_activity()
        ],
    }
