# accounting/models/account.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class Account(models.Model):
    """
    A ledger party (bank, supplier, customer, expense head, person).

    Guarantees:
    - account_name is trimmed and unique among active accounts
    - opening_balance is a non-negative magnitude; balance_status carries the sign
    - current_balance is a cache of the ledger fold, never the source of truth
    """

    BANKS = "BANKS"
    DOLLAR_LEDGERS = "DOLLAR_LEDGERS"
    EXPORT_PARTIES = "EXPORT_PARTIES"
    IMPORT_PARTIES = "IMPORT_PARTIES"
    NLC_TAFTAN_EXPENSE_LEDGERS = "NLC_TAFTAN_EXPENSE_LEDGERS"
    PERSONALS = "PERSONALS"

    SUB_HEADS = [
        (BANKS, "Banks"),
        (DOLLAR_LEDGERS, "Dollar Ledgers"),
        (EXPORT_PARTIES, "Export Parties"),
        (IMPORT_PARTIES, "Import Parties"),
        (NLC_TAFTAN_EXPENSE_LEDGERS, "NLC / Taftan Expense Ledgers"),
        (PERSONALS, "Personals"),
    ]

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    BALANCE_STATUSES = [
        (CREDIT, "Credit"),
        (DEBIT, "Debit"),
    ]

    UNLIMITED = "UNLIMITED"
    LIMITED = "LIMITED"

    LIMIT_STATUSES = [
        (UNLIMITED, "Unlimited"),
        (LIMITED, "Limited"),
    ]

    account_name = models.CharField(max_length=150)

    sub_head = models.CharField(
        max_length=32,
        choices=SUB_HEADS,
    )

    balance_status = models.CharField(
        max_length=6,
        choices=BALANCE_STATUSES,
        default=CREDIT,
    )

    opening_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    current_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Cached signed running balance (credit positive).",
    )

    cell_no = models.CharField(max_length=32, blank=True, default="")
    ntn_number = models.CharField(max_length=32, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")

    limit_status = models.CharField(
        max_length=9,
        choices=LIMIT_STATUSES,
        default=UNLIMITED,
    )
    limit_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    remarks = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["account_name"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["sub_head"], name="acct_account_subhead_idx"),
            models.Index(fields=["is_active"], name="acct_account_active_idx"),
            models.Index(fields=["sub_head", "is_active"], name="acct_account_sh_active_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["account_name"],
                condition=Q(is_active=True),
                name="uniq_active_account_name",
            ),
            models.CheckConstraint(
                condition=~Q(account_name=""),
                name="chk_account_name_not_blank",
            ),
            models.CheckConstraint(
                condition=Q(opening_balance__gte=0),
                name="chk_account_opening_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.account_name} ({self.get_sub_head_display()})"

    @property
    def signed_opening_balance(self) -> Decimal:
        amount = self.opening_balance or Decimal("0.00")
        return amount if self.balance_status == self.CREDIT else -amount

    def clean(self):
        self.account_name = (self.account_name or "").strip()
        self.cell_no = (self.cell_no or "").strip()
        self.ntn_number = (self.ntn_number or "").strip()
        self.address = (self.address or "").strip()

        if not self.account_name:
            raise ValidationError("Account name is required")

        if self.opening_balance is not None and self.opening_balance < 0:
            raise ValidationError(
                "Opening balance must be a non-negative amount; use balance_status for the side"
            )

        if self.limit_status == self.LIMITED and (self.limit_amount or 0) <= 0:
            raise ValidationError("limit_amount must be > 0 when limit_status is LIMITED")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
