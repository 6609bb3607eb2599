# accounting/models/ledger.py

"""
======================================================
PATH: accounting/models/ledger.py
======================================================
LEDGER ENTRY MODEL

Atomic, dated credit or debit posting to a single account.

Guarantees:
- Single-sided: exactly one of credit_amount / debit_amount is > 0
- Immutable once created; the only permitted change is a soft delete
  (is_deleted + deleted_at), applied through LedgerEntry.objects
- At most one live posting per (reference_type, reference_id)
- Reporting order is (entry_date, created_at, id)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounting.models.account import Account


class LedgerEntryQuerySet(models.QuerySet):
    def live(self):
        return self.filter(is_deleted=False)

    def in_posting_order(self):
        return self.order_by("entry_date", "created_at", "id")

    def soft_delete(self) -> int:
        return self.filter(is_deleted=False).update(
            is_deleted=True,
            deleted_at=timezone.now(),
        )


class LedgerEntry(models.Model):
    REF_CASHBOOK = "CASHBOOK"
    REF_IMPORT = "IMPORT"
    REF_EXPORT = "EXPORT"
    REF_INVOICE = "INVOICE"

    REFERENCE_TYPES = [
        (REF_CASHBOOK, "Cashbook"),
        (REF_IMPORT, "Import"),
        (REF_EXPORT, "Export"),
        (REF_INVOICE, "Invoice"),
    ]

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    entry_date = models.DateField()

    credit_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    debit_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    detail = models.CharField(max_length=255, blank=True, default="")

    reference_type = models.CharField(
        max_length=10,
        choices=REFERENCE_TYPES,
    )
    reference_id = models.CharField(max_length=64)

    remarks = models.TextField(blank=True, default="")

    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = LedgerEntryQuerySet.as_manager()

    class Meta:
        verbose_name = "Ledger Entry"
        verbose_name_plural = "Ledger Entries"
        ordering = ["entry_date", "created_at", "id"]
        indexes = [
            models.Index(fields=["account", "entry_date"], name="acct_ledger_acct_date_idx"),
            models.Index(fields=["account", "is_deleted"], name="acct_ledger_acct_del_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="acct_ledger_reference_idx"),
            models.Index(fields=["entry_date"], name="acct_ledger_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(credit_amount__gte=0) & Q(debit_amount__gte=0),
                name="chk_ledger_amounts_non_negative",
            ),
            models.CheckConstraint(
                condition=(
                    (Q(credit_amount__gt=0) & Q(debit_amount=0))
                    | (Q(debit_amount__gt=0) & Q(credit_amount=0))
                ),
                name="chk_ledger_single_sided",
            ),
            models.UniqueConstraint(
                fields=["reference_type", "reference_id"],
                condition=Q(is_deleted=False),
                name="uniq_live_ledger_reference",
            ),
        ]

    def __str__(self):
        side = "Cr" if self.credit_amount > 0 else "Dr"
        return f"{self.entry_date} {side} {self.amount} → {self.account}"

    @property
    def amount(self) -> Decimal:
        return self.credit_amount if self.credit_amount > 0 else self.debit_amount

    @property
    def signed_amount(self) -> Decimal:
        return (self.credit_amount or Decimal("0.00")) - (self.debit_amount or Decimal("0.00"))

    def clean(self):
        credit = self.credit_amount or Decimal("0.00")
        debit = self.debit_amount or Decimal("0.00")

        if credit < 0 or debit < 0:
            raise ValidationError("Ledger amounts must be non-negative")

        if (credit > 0) == (debit > 0):
            raise ValidationError("Ledger entry must be single-sided (credit XOR debit)")

        if not (self.reference_id or "").strip():
            raise ValidationError("reference_id is required")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("LedgerEntry records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "LedgerEntry records cannot be deleted; reverse the posting instead"
        )
