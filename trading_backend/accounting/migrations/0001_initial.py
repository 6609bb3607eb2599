"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: INITIAL ACCOUNTING SCHEMA

Creates:
- Account (active-name uniqueness, non-negative opening balance)
- LedgerEntry (single-sided amounts, one live posting per reference)
- CashbookEntry
- ActivityLog
"""

from __future__ import annotations

from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_name", models.CharField(max_length=150)),
                (
                    "sub_head",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("BANKS", "Banks"),
                            ("DOLLAR_LEDGERS", "Dollar Ledgers"),
                            ("EXPORT_PARTIES", "Export Parties"),
                            ("IMPORT_PARTIES", "Import Parties"),
                            ("NLC_TAFTAN_EXPENSE_LEDGERS", "NLC / Taftan Expense Ledgers"),
                            ("PERSONALS", "Personals"),
                        ],
                    ),
                ),
                (
                    "balance_status",
                    models.CharField(
                        max_length=6,
                        choices=[("CREDIT", "Credit"), ("DEBIT", "Debit")],
                        default="CREDIT",
                    ),
                ),
                (
                    "opening_balance",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "current_balance",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Cached signed running balance (credit positive).",
                    ),
                ),
                ("cell_no", models.CharField(max_length=32, blank=True, default="")),
                ("ntn_number", models.CharField(max_length=32, blank=True, default="")),
                ("address", models.CharField(max_length=255, blank=True, default="")),
                (
                    "limit_status",
                    models.CharField(
                        max_length=9,
                        choices=[("UNLIMITED", "Unlimited"), ("LIMITED", "Limited")],
                        default="UNLIMITED",
                    ),
                ),
                (
                    "limit_amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("remarks", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["account_name"],
            },
        ),
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "action",
                    models.CharField(
                        max_length=6,
                        choices=[("CREATE", "Create"), ("UPDATE", "Update"), ("DELETE", "Delete")],
                    ),
                ),
                (
                    "entity",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("ACCOUNT", "Account"),
                            ("CASHBOOK", "Cashbook"),
                            ("IMPORT", "Import"),
                            ("EXPORT", "Export"),
                            ("INVOICE", "Invoice"),
                            ("PRODUCT", "Product"),
                            ("VEHICLE", "Vehicle"),
                        ],
                    ),
                ),
                ("entity_id", models.CharField(max_length=64, blank=True, default="")),
                ("description", models.CharField(max_length=255, blank=True, default="")),
                ("performed_by", models.CharField(max_length=150, default="System")),
                ("metadata", models.JSONField(default=dict, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Activity Log",
                "verbose_name_plural": "Activity Logs",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="CashbookEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_date", models.DateField()),
                (
                    "pay_status",
                    models.CharField(
                        max_length=6,
                        choices=[("CREDIT", "Credit"), ("DEBIT", "Debit")],
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                ("payment_detail", models.CharField(max_length=255, blank=True, default="")),
                ("remarks", models.TextField(blank=True, default="")),
                ("balance_after", models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))),
                ("is_deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cashbook_entries",
                    ),
                ),
            ],
            options={
                "verbose_name": "Cashbook Entry",
                "verbose_name_plural": "Cashbook Entries",
                "ordering": ["entry_date", "created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_date", models.DateField()),
                (
                    "credit_amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "debit_amount",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("detail", models.CharField(max_length=255, blank=True, default="")),
                (
                    "reference_type",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CASHBOOK", "Cashbook"),
                            ("IMPORT", "Import"),
                            ("EXPORT", "Export"),
                            ("INVOICE", "Invoice"),
                        ],
                    ),
                ),
                ("reference_id", models.CharField(max_length=64)),
                ("remarks", models.TextField(blank=True, default="")),
                ("is_deleted", models.BooleanField(default=False)),
                ("deleted_at", models.DateTimeField(null=True, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        to="accounting.account",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                    ),
                ),
            ],
            options={
                "verbose_name": "Ledger Entry",
                "verbose_name_plural": "Ledger Entries",
                "ordering": ["entry_date", "created_at", "id"],
            },
        ),
        # Account
        migrations.AddIndex(
            model_name="account",
            index=models.Index(fields=["sub_head"], name="acct_account_subhead_idx"),
        ),
        migrations.AddIndex(
            model_name="account",
            index=models.Index(fields=["is_active"], name="acct_account_active_idx"),
        ),
        migrations.AddIndex(
            model_name="account",
            index=models.Index(fields=["sub_head", "is_active"], name="acct_account_sh_active_idx"),
        ),
        migrations.AddConstraint(
            model_name="account",
            constraint=models.UniqueConstraint(
                fields=["account_name"],
                condition=models.Q(is_active=True),
                name="uniq_active_account_name",
            ),
        ),
        migrations.AddConstraint(
            model_name="account",
            constraint=models.CheckConstraint(
                condition=~models.Q(account_name=""),
                name="chk_account_name_not_blank",
            ),
        ),
        migrations.AddConstraint(
            model_name="account",
            constraint=models.CheckConstraint(
                condition=models.Q(opening_balance__gte=0),
                name="chk_account_opening_balance_non_negative",
            ),
        ),
        # ActivityLog
        migrations.AddIndex(
            model_name="activitylog",
            index=models.Index(fields=["entity", "entity_id"], name="acct_activity_entity_idx"),
        ),
        migrations.AddIndex(
            model_name="activitylog",
            index=models.Index(fields=["created_at"], name="acct_activity_created_idx"),
        ),
        # CashbookEntry
        migrations.AddIndex(
            model_name="cashbookentry",
            index=models.Index(fields=["entry_date"], name="acct_cash_date_idx"),
        ),
        migrations.AddIndex(
            model_name="cashbookentry",
            index=models.Index(fields=["account", "entry_date"], name="acct_cash_acct_date_idx"),
        ),
        migrations.AddIndex(
            model_name="cashbookentry",
            index=models.Index(fields=["pay_status"], name="acct_cash_status_idx"),
        ),
        migrations.AddIndex(
            model_name="cashbookentry",
            index=models.Index(fields=["is_deleted"], name="acct_cash_deleted_idx"),
        ),
        # LedgerEntry
        migrations.AddIndex(
            model_name="ledgerentry",
            index=models.Index(fields=["account", "entry_date"], name="acct_ledger_acct_date_idx"),
        ),
        migrations.AddIndex(
            model_name="ledgerentry",
            index=models.Index(fields=["account", "is_deleted"], name="acct_ledger_acct_del_idx"),
        ),
        migrations.AddIndex(
            model_name="ledgerentry",
            index=models.Index(fields=["reference_type", "reference_id"], name="acct_ledger_reference_idx"),
        ),
        migrations.AddIndex(
            model_name="ledgerentry",
            index=models.Index(fields=["entry_date"], name="acct_ledger_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="ledgerentry",
            constraint=models.CheckConstraint(
                condition=models.Q(credit_amount__gte=0) & models.Q(debit_amount__gte=0),
                name="chk_ledger_amounts_non_negative",
            ),
        ),
        migrations.AddConstraint(
            model_name="ledgerentry",
            constraint=models.CheckConstraint(
                condition=(
                    (models.Q(credit_amount__gt=0) & models.Q(debit_amount=0))
                    | (models.Q(debit_amount__gt=0) & models.Q(credit_amount=0))
                ),
                name="chk_ledger_single_sided",
            ),
        ),
        migrations.AddConstraint(
            model_name="ledgerentry",
            constraint=models.UniqueConstraint(
                fields=["reference_type", "reference_id"],
                condition=models.Q(is_deleted=False),
                name="uniq_live_ledger_reference",
            ),
        ),
    ]
