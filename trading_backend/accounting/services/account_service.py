# PATH: accounting/services/account_service.py

"""
ACCOUNT SERVICE

- Create / update accounts (never hard-delete; deactivate instead)
- Opening balance or balance_status changes refresh the balance cache
- Keyword search over account_name
"""

from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.activity import ActivityLog
from accounting.services import ledger_store
from accounting.services.activity_log_service import log_activity
from accounting.services.balance_cache import refresh_account_balance
from accounting.services.exceptions import AccountingServiceError

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

EDITABLE_FIELDS = (
    "account_name",
    "sub_head",
    "balance_status",
    "opening_balance",
    "cell_no",
    "ntn_number",
    "address",
    "limit_status",
    "limit_amount",
    "remarks",
    "is_active",
)

BALANCE_FIELDS = ("opening_balance", "balance_status")


class AccountValidationError(AccountingServiceError):
    """Raised when an account payload is invalid."""


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _save(account: Account) -> None:
    try:
        with transaction.atomic():
            account.save()
    except ValidationError as exc:
        raise AccountValidationError("; ".join(exc.messages)) from exc
    except IntegrityError as exc:
        raise AccountValidationError(
            f"An active account named {account.account_name!r} already exists."
        ) from exc


@transaction.atomic
def create_account(*, user=None, **fields) -> Account:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise AccountValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")

    for money_field in ("opening_balance", "limit_amount"):
        if money_field in fields:
            fields[money_field] = _money(fields[money_field])

    account = Account(**fields)
    account.current_balance = account.signed_opening_balance
    _save(account)

    logger.info(
        "Account created",
        extra={"account_id": account.id, "account_name": account.account_name},
    )
    log_activity(
        action=ActivityLog.CREATE,
        entity=ActivityLog.ENTITY_ACCOUNT,
        entity_id=account.id,
        description=f"Account {account.account_name} created",
        user=user,
        metadata={"sub_head": account.sub_head, "opening_balance": str(account.opening_balance)},
    )
    return account


@transaction.atomic
def update_account(account_id, *, user=None, **fields) -> Account:
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise AccountValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")

    account = ledger_store.lock_account(account_id)

    changed = {}
    for name, value in fields.items():
        if name in ("opening_balance", "limit_amount"):
            value = _money(value)
        if getattr(account, name) != value:
            changed[name] = {"from": str(getattr(account, name)), "to": str(value)}
            setattr(account, name, value)

    if not changed:
        return account

    _save(account)

    if any(name in changed for name in BALANCE_FIELDS):
        refresh_account_balance(account.id)
        account.refresh_from_db()

    logger.info(
        "Account updated",
        extra={"account_id": account.id, "fields": sorted(changed)},
    )
    log_activity(
        action=ActivityLog.UPDATE,
        entity=ActivityLog.ENTITY_ACCOUNT,
        entity_id=account.id,
        description=f"Account {account.account_name} updated",
        user=user,
        metadata={"changes": changed},
    )
    return account


def search_accounts(query: str, *, active_only: bool = True):
    """
    Case-insensitive match on any word of the query against account_name.
    """
    qs = Account.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)

    words = [w for w in (query or "").split() if w]
    if words:
        cond = Q()
        for w in words:
            cond |= Q(account_name__icontains=w)
        qs = qs.filter(cond)

    return qs.order_by("account_name", "id")
