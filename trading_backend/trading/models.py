# trading/models.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounting.models.account import Account
from trading.calculations import UNIT_BAGS, UNIT_KG, UNIT_LITRE


class Product(models.Model):
    """
    Goods master data. Trade documents reference a product by id.

    Products are deactivated, never deleted: historical documents keep
    pointing at them.
    """

    name = models.CharField(max_length=200)
    description = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.UniqueConstraint(
                fields=["name"],
                condition=Q(is_active=True),
                name="uniq_active_product_name",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = " ".join((self.name or "").split())
        self.description = (self.description or "").strip()

        if not self.name:
            raise ValidationError({"name": "Product name is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class Vehicle(models.Model):
    """
    Registered vehicle. vehicle_no is stored upper-case ("LEA-123").

    Trade documents list vehicle numbers as text; every number must belong
    to an active vehicle when the document is written.
    """

    vehicle_no = models.CharField(max_length=32)
    description = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["vehicle_no"]
        verbose_name = "Vehicle"
        verbose_name_plural = "Vehicles"
        constraints = [
            models.UniqueConstraint(
                fields=["vehicle_no"],
                condition=Q(is_active=True),
                name="uniq_active_vehicle_no",
            ),
        ]

    def __str__(self):
        return self.vehicle_no

    def clean(self):
        self.vehicle_no = "".join((self.vehicle_no or "").split()).upper()
        self.description = (self.description or "").strip()

        if not self.vehicle_no:
            raise ValidationError({"vehicle_no": "Vehicle number is required"})
        if "," in self.vehicle_no:
            raise ValidationError({"vehicle_no": "Vehicle number cannot contain a comma"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class TradeEntry(models.Model):
    """
    Shared shape of goods documents (import, export, invoice).

    total_weight / amount are derived by trading.services.trade_service and
    stored so reports never recompute them. Each live document owns exactly
    one ledger posting.
    """

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="%(class)s_entries",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="%(class)s_entries",
    )

    entry_date = models.DateField(default=timezone.localdate)

    bags_qty = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        validators=[MinValueValidator(Decimal("0.000"))],
    )
    weight_per_bag = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
        validators=[MinValueValidator(Decimal("0.000"))],
    )
    rate_per_kg = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0.0000"),
        validators=[MinValueValidator(Decimal("0.0000"))],
    )

    total_weight = models.DecimalField(max_digits=16, decimal_places=3, default=Decimal("0.000"))
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    vehicle_numbers = models.CharField(max_length=255, blank=True, default="")
    invoice_no = models.CharField(max_length=32)
    remarks = models.TextField(blank=True, default="")

    is_deleted = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["entry_date", "created_at", "id"]

    def clean(self):
        self.invoice_no = (self.invoice_no or "").strip().upper()
        self.vehicle_numbers = (self.vehicle_numbers or "").strip()

        if not self.invoice_no:
            raise ValidationError({"invoice_no": "invoice_no is required"})

        if self.amount is not None and self.amount < Decimal("0.00"):
            raise ValidationError({"amount": "amount cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def vehicles(self) -> list[str]:
        return [v.strip().upper() for v in (self.vehicle_numbers or "").split(",") if v.strip()]


class ImportEntry(TradeEntry):
    """
    Goods received from a supplier (GRN). Posts DEBIT to the supplier account.
    """

    supplier = models.CharField(max_length=200, blank=True, default="")
    grn_no = models.CharField(max_length=64, blank=True, default="")

    class Meta(TradeEntry.Meta):
        verbose_name = "Import Entry"
        verbose_name_plural = "Import Entries"
        constraints = [
            models.UniqueConstraint(
                fields=["invoice_no"],
                condition=Q(is_deleted=False),
                name="uniq_live_import_invoice_no",
            ),
            models.CheckConstraint(
                condition=Q(amount__gte=Decimal("0.00")),
                name="import_entry_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["entry_date"], name="trading_imp_date_idx"),
            models.Index(fields=["grn_no"], name="trading_imp_grn_idx"),
            models.Index(fields=["account", "entry_date"], name="trading_imp_acct_date_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_no} ({self.supplier or self.account})"


class ExportEntry(TradeEntry):
    """
    Goods shipped to an export party (GD). Posts CREDIT to the party account.
    """

    gd_no = models.CharField(max_length=64, blank=True, default="")

    class Meta(TradeEntry.Meta):
        verbose_name = "Export Entry"
        verbose_name_plural = "Export Entries"
        constraints = [
            models.UniqueConstraint(
                fields=["invoice_no"],
                condition=Q(is_deleted=False),
                name="uniq_live_export_invoice_no",
            ),
            models.CheckConstraint(
                condition=Q(amount__gte=Decimal("0.00")),
                name="export_entry_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["entry_date"], name="trading_exp_date_idx"),
            models.Index(fields=["gd_no"], name="trading_exp_gd_idx"),
            models.Index(fields=["account", "entry_date"], name="trading_exp_acct_date_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_no} ({self.product or self.account})"


class InvoiceEntry(TradeEntry):
    """
    Purchase invoice with handling charges. Posts DEBIT to the supplier account.
    """

    WEIGHT_UNITS = [
        (UNIT_KG, "Kg"),
        (UNIT_LITRE, "Litre"),
        (UNIT_BAGS, "Bags"),
    ]

    supplier = models.CharField(max_length=200, blank=True, default="")
    grn_no = models.CharField(max_length=64, blank=True, default="")
    weight_unit = models.CharField(max_length=8, choices=WEIGHT_UNITS, default=UNIT_KG)

    bardana = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    mazdoori = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    munshiana = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    charsadna = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    walai = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    tol = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta(TradeEntry.Meta):
        verbose_name = "Invoice Entry"
        verbose_name_plural = "Invoice Entries"
        constraints = [
            models.UniqueConstraint(
                fields=["invoice_no"],
                condition=Q(is_deleted=False),
                name="uniq_live_invoice_invoice_no",
            ),
            models.CheckConstraint(
                condition=Q(amount__gte=Decimal("0.00")),
                name="invoice_entry_amount_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["entry_date"], name="trading_inv_date_idx"),
            models.Index(fields=["account", "entry_date"], name="trading_inv_acct_date_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_no} ({self.supplier or self.account})"
