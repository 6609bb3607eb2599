"""
======================================================
PATH: trading/migrations/0001_initial.py
======================================================
MIGRATION: INITIAL TRADING SCHEMA

Creates:
- Product / Vehicle master data (names unique among active rows)
- ImportEntry / ExportEntry / InvoiceEntry
  (invoice_no unique among live documents, amount non-negative)
"""

from __future__ import annotations

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


def _trade_fields(model_name: str) -> list:
    """Columns shared by the three goods documents."""
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("entry_date", models.DateField(default=django.utils.timezone.localdate)),
        (
            "bags_qty",
            models.DecimalField(
                max_digits=14,
                decimal_places=3,
                default=Decimal("0.000"),
                validators=[django.core.validators.MinValueValidator(Decimal("0.000"))],
            ),
        ),
        (
            "weight_per_bag",
            models.DecimalField(
                max_digits=14,
                decimal_places=3,
                default=Decimal("0.000"),
                validators=[django.core.validators.MinValueValidator(Decimal("0.000"))],
            ),
        ),
        (
            "rate_per_kg",
            models.DecimalField(
                max_digits=14,
                decimal_places=4,
                default=Decimal("0.0000"),
                validators=[django.core.validators.MinValueValidator(Decimal("0.0000"))],
            ),
        ),
        ("total_weight", models.DecimalField(max_digits=16, decimal_places=3, default=Decimal("0.000"))),
        ("amount", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
        ("vehicle_numbers", models.CharField(max_length=255, blank=True, default="")),
        ("invoice_no", models.CharField(max_length=32)),
        ("remarks", models.TextField(blank=True, default="")),
        ("is_deleted", models.BooleanField(default=False)),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "account",
            models.ForeignKey(
                to="accounting.account",
                on_delete=django.db.models.deletion.PROTECT,
                related_name="%(class)s_entries",
            ),
        ),
        (
            "product",
            models.ForeignKey(
                to="trading.product",
                on_delete=django.db.models.deletion.PROTECT,
                null=True,
                blank=True,
                related_name="%(class)s_entries",
            ),
        ),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("vehicle_no", models.CharField(max_length=32)),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Vehicle",
                "verbose_name_plural": "Vehicles",
                "ordering": ["vehicle_no"],
            },
        ),
        migrations.CreateModel(
            name="ImportEntry",
            fields=_trade_fields("importentry")
            + [
                ("supplier", models.CharField(max_length=200, blank=True, default="")),
                ("grn_no", models.CharField(max_length=64, blank=True, default="")),
            ],
            options={
                "verbose_name": "Import Entry",
                "verbose_name_plural": "Import Entries",
                "ordering": ["entry_date", "created_at", "id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ExportEntry",
            fields=_trade_fields("exportentry")
            + [
                ("gd_no", models.CharField(max_length=64, blank=True, default="")),
            ],
            options={
                "verbose_name": "Export Entry",
                "verbose_name_plural": "Export Entries",
                "ordering": ["entry_date", "created_at", "id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="InvoiceEntry",
            fields=_trade_fields("invoiceentry")
            + [
                ("supplier", models.CharField(max_length=200, blank=True, default="")),
                ("grn_no", models.CharField(max_length=64, blank=True, default="")),
                (
                    "weight_unit",
                    models.CharField(
                        max_length=8,
                        choices=[("kg", "Kg"), ("litre", "Litre"), ("bags", "Bags")],
                        default="kg",
                    ),
                ),
                ("bardana", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("mazdoori", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("munshiana", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("charsadna", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("walai", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("tol", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
            ],
            options={
                "verbose_name": "Invoice Entry",
                "verbose_name_plural": "Invoice Entries",
                "ordering": ["entry_date", "created_at", "id"],
                "abstract": False,
            },
        ),
        # Master data
        migrations.AddConstraint(
            model_name="product",
            constraint=models.UniqueConstraint(
                fields=["name"],
                condition=models.Q(is_active=True),
                name="uniq_active_product_name",
            ),
        ),
        migrations.AddConstraint(
            model_name="vehicle",
            constraint=models.UniqueConstraint(
                fields=["vehicle_no"],
                condition=models.Q(is_active=True),
                name="uniq_active_vehicle_no",
            ),
        ),
        # ImportEntry
        migrations.AddIndex(
            model_name="importentry",
            index=models.Index(fields=["entry_date"], name="trading_imp_date_idx"),
        ),
        migrations.AddIndex(
            model_name="importentry",
            index=models.Index(fields=["grn_no"], name="trading_imp_grn_idx"),
        ),
        migrations.AddIndex(
            model_name="importentry",
            index=models.Index(fields=["account", "entry_date"], name="trading_imp_acct_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="importentry",
            constraint=models.UniqueConstraint(
                fields=["invoice_no"],
                condition=models.Q(is_deleted=False),
                name="uniq_live_import_invoice_no",
            ),
        ),
        migrations.AddConstraint(
            model_name="importentry",
            constraint=models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="import_entry_amount_nonnegative",
            ),
        ),
        # ExportEntry
        migrations.AddIndex(
            model_name="exportentry",
            index=models.Index(fields=["entry_date"], name="trading_exp_date_idx"),
        ),
        migrations.AddIndex(
            model_name="exportentry",
            index=models.Index(fields=["gd_no"], name="trading_exp_gd_idx"),
        ),
        migrations.AddIndex(
            model_name="exportentry",
            index=models.Index(fields=["account", "entry_date"], name="trading_exp_acct_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="exportentry",
            constraint=models.UniqueConstraint(
                fields=["invoice_no"],
                condition=models.Q(is_deleted=False),
                name="uniq_live_export_invoice_no",
            ),
        ),
        migrations.AddConstraint(
            model_name="exportentry",
            constraint=models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="export_entry_amount_nonnegative",
            ),
        ),
        # InvoiceEntry
        migrations.AddIndex(
            model_name="invoiceentry",
            index=models.Index(fields=["entry_date"], name="trading_inv_date_idx"),
        ),
        migrations.AddIndex(
            model_name="invoiceentry",
            index=models.Index(fields=["account", "entry_date"], name="trading_inv_acct_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="invoiceentry",
            constraint=models.UniqueConstraint(
                fields=["invoice_no"],
                condition=models.Q(is_deleted=False),
                name="uniq_live_invoice_invoice_no",
            ),
        ),
        migrations.AddConstraint(
            model_name="invoiceentry",
            constraint=models.CheckConstraint(
                condition=models.Q(amount__gte=Decimal("0.00")),
                name="invoice_entry_amount_nonnegative",
            ),
        ),
    ]
