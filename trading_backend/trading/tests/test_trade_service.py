# trading/tests/test_trade_service.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.services import balance_service
from accounting.services.account_service import create_account, update_account
from accounting.services.exceptions import AccountNotFoundError, PostingRuleError
from trading.models import ExportEntry, ImportEntry
from trading.services.exceptions import TradeEntryError, TradeEntryNotFoundError
from trading.services.master_data_service import create_vehicle
from trading.services.trade_service import (
    create_trade_entry,
    delete_trade_entry,
    get_entry,
    list_trade_entries,
    next_invoice_number,
    update_trade_entry,
)

D1 = date(2024, 4, 1)
D2 = date(2024, 4, 2)


def _live_postings(reference_type, entry_id):
    return LedgerEntry.objects.live().filter(reference_type=reference_type, reference_id=str(entry_id))


class TradeEntryPostingTests(TestCase):
    """
    GUARANTEES:
    - total_weight / amount are derived, never taken from input
    - Export credits the party, import / invoice debit it
    - Edits repost; deletes reverse; one live posting per live document
    """

    def setUp(self):
        self.party = create_account(
            account_name="Trade Party",
            sub_head=Account.IMPORT_PARTIES,
            opening_balance=Decimal("0"),
        )
        create_vehicle(vehicle_no="LEA-1")

    def _import(self, **extra):
        data = {"bags_qty": Decimal("10"), "weight_per_bag": Decimal("100"), "rate_per_kg": Decimal("1"), "entry_date": D1}
        data.update(extra)
        return create_trade_entry("import", account_id=self.party.id, **data)

    def test_import_posts_debit(self):
        entry = self._import(supplier="Herat Mills", vehicle_numbers="LEA-1")

        self.assertEqual(entry.invoice_no, "IMP001")
        self.assertEqual(entry.total_weight, Decimal("1000.000"))
        self.assertEqual(entry.amount, Decimal("1000.00"))
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("-1000.00"))

        posting = _live_postings(LedgerEntry.REF_IMPORT, entry.id).get()
        self.assertEqual(posting.debit_amount, Decimal("1000.00"))
        self.assertIn("Herat Mills", posting.detail)

    def test_export_posts_credit(self):
        entry = create_trade_entry(
            "export",
            account_id=self.party.id,
            bags_qty=Decimal("20"),
            weight_per_bag=Decimal("50"),
            rate_per_kg=Decimal("1"),
            entry_date=D1,
            gd_no="GD-77",
        )

        self.assertEqual(entry.invoice_no, "HAH001")
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("1000.00"))

    def test_invoice_includes_adjustments(self):
        entry = create_trade_entry(
            "invoice",
            account_id=self.party.id,
            weight_unit="kg",
            bags_qty=Decimal("500"),
            rate_per_kg=Decimal("2"),
            bardana=Decimal("25"),
            tol=Decimal("5"),
            entry_date=D1,
        )

        self.assertEqual(entry.invoice_no, "INV001")
        self.assertEqual(entry.amount, Decimal("1030.00"))
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("-1030.00"))

    def test_numbering_continues_and_never_reuses(self):
        first = self._import()
        second = self._import()
        self.assertEqual(second.invoice_no, "IMP002")

        delete_trade_entry("import", second.id)

        self.assertEqual(next_invoice_number("import"), "IMP003")
        self.assertEqual(first.invoice_no, "IMP001")

    def test_manual_invoice_number_is_normalized_and_unique(self):
        entry = self._import(invoice_no=" imp-x1 ")
        self.assertEqual(entry.invoice_no, "IMP-X1")

        with self.assertRaises(TradeEntryError):
            self._import(invoice_no="IMP-X1")

        self.assertEqual(ImportEntry.objects.count(), 1)

    def test_edit_reposts(self):
        entry = self._import()

        updated = update_trade_entry("import", entry.id, rate_per_kg=Decimal("2.5"))

        self.assertEqual(updated.amount, Decimal("2500.00"))
        self.assertEqual(_live_postings(LedgerEntry.REF_IMPORT, entry.id).count(), 1)
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("-2500.00"))

    def test_edit_moves_account(self):
        other = create_account(account_name="Second Party", sub_head=Account.IMPORT_PARTIES)
        entry = self._import()

        update_trade_entry("import", entry.id, account_id=other.id)

        self.party.refresh_from_db()
        other.refresh_from_db()
        self.assertEqual(self.party.current_balance, Decimal("0.00"))
        self.assertEqual(other.current_balance, Decimal("-1000.00"))

    def test_delete_reverses(self):
        entry = self._import()

        delete_trade_entry("import", entry.id)

        self.assertFalse(_live_postings(LedgerEntry.REF_IMPORT, entry.id).exists())
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("0.00"))
        with self.assertRaises(TradeEntryNotFoundError):
            get_entry("import", entry.id)

    def test_zero_amount_is_refused_and_rolled_back(self):
        with self.assertRaises(PostingRuleError):
            self._import(rate_per_kg=Decimal("0"))

        self.assertFalse(ImportEntry.objects.exists())

    def test_inactive_account_refused(self):
        update_account(self.party.id, is_active=False)

        with self.assertRaises(AccountNotFoundError):
            self._import()

    def test_unknown_kind_and_fields(self):
        with self.assertRaises(TradeEntryError):
            create_trade_entry("barter", account_id=self.party.id)

        with self.assertRaises(TradeEntryError):
            create_trade_entry("export", account_id=self.party.id, supplier="wrong field for exports")

    def test_list_filters(self):
        self._import(entry_date=D1, invoice_no="IMP-A")
        self._import(entry_date=D2, invoice_no="IMP-B")

        self.assertEqual(list_trade_entries("import", from_date=D2).count(), 1)
        self.assertEqual([e.invoice_no for e in list_trade_entries("import", search="imp-a")], ["IMP-A"])
        self.assertEqual(ExportEntry.objects.count(), 0)
