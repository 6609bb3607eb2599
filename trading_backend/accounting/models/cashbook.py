# accounting/models/cashbook.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from accounting.models.account import Account


class CashbookEntry(models.Model):
    """
    Cash received from (CREDIT) or paid to (DEBIT) an account.

    Each live entry owns exactly one ledger posting (reference_type=CASHBOOK).
    balance_after is a cache of the account's running balance at this entry.
    """

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    PAY_STATUSES = [
        (CREDIT, "Credit"),
        (DEBIT, "Debit"),
    ]

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="cashbook_entries",
    )

    entry_date = models.DateField()

    pay_status = models.CharField(
        max_length=6,
        choices=PAY_STATUSES,
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    payment_detail = models.CharField(max_length=255, blank=True, default="")
    remarks = models.TextField(blank=True, default="")

    balance_after = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    is_deleted = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["entry_date", "created_at", "id"]
        verbose_name = "Cashbook Entry"
        verbose_name_plural = "Cashbook Entries"
        indexes = [
            models.Index(fields=["entry_date"], name="acct_cash_date_idx"),
            models.Index(fields=["account", "entry_date"], name="acct_cash_acct_date_idx"),
            models.Index(fields=["pay_status"], name="acct_cash_status_idx"),
            models.Index(fields=["is_deleted"], name="acct_cash_deleted_idx"),
        ]

    def __str__(self):
        return f"{self.entry_date} {self.pay_status} {self.amount} ({self.account})"

    def clean(self):
        self.payment_detail = (self.payment_detail or "").strip()

        if self.pay_status not in (self.CREDIT, self.DEBIT):
            raise ValidationError("Invalid pay_status")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Cashbook amount must be > 0")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
