# trading/tests/test_reports.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.ledger import LedgerEntry
from accounting.services.account_service import create_account
from accounting.services.cashbook_service import create_cashbook_entry
from accounting.services.exceptions import InvalidQueryError, InvalidRangeError
from trading.services import report_service
from trading.services.master_data_service import create_vehicle
from trading.services.trade_service import create_trade_entry

D1 = date(2024, 7, 1)
D2 = date(2024, 7, 2)


class TradeReportTests(TestCase):
    """
    GUARANTEES:
    - Vehicle report lists a multi-vehicle document under each vehicle
    - Documents without a vehicle group last under "No Vehicle"
    - Dashboard figures cover exactly one day
    """

    def setUp(self):
        self.party = create_account(account_name="Report Party", sub_head=Account.EXPORT_PARTIES)
        create_account(account_name="Dormant", sub_head=Account.PERSONALS, is_active=False)
        create_vehicle(vehicle_no="LEA-1")
        create_vehicle(vehicle_no="QTA-9")

        self.imp = create_trade_entry(
            "import",
            account_id=self.party.id,
            bags_qty=Decimal("10"),
            weight_per_bag=Decimal("10"),
            rate_per_kg=Decimal("1"),
            vehicle_numbers="QTA-9, LEA-1",
            entry_date=D1,
        )
        self.exp = create_trade_entry(
            "export",
            account_id=self.party.id,
            bags_qty=Decimal("5"),
            weight_per_bag=Decimal("20"),
            rate_per_kg=Decimal("3"),
            vehicle_numbers="LEA-1",
            gd_no="GD-2024-15",
            entry_date=D1,
        )
        self.inv = create_trade_entry(
            "invoice",
            account_id=self.party.id,
            bags_qty=Decimal("40"),
            rate_per_kg=Decimal("1"),
            entry_date=D2,
        )

    def test_vehicle_groups(self):
        data = report_service.vehicle_wise_report()
        groups = {g["vehicle"]: g for g in data["groups"]}

        self.assertEqual([g["vehicle"] for g in data["groups"]], ["LEA-1", "QTA-9", "No Vehicle"])
        self.assertEqual(groups["LEA-1"]["documents"], 2)
        self.assertEqual(groups["LEA-1"]["total_amount"], "400.00")
        self.assertEqual(groups["QTA-9"]["total_weight"], "100.000")
        self.assertEqual(groups["No Vehicle"]["rows"][0]["kind"], "invoice")

    def test_vehicle_filter_and_range(self):
        data = report_service.vehicle_wise_report(vehicle="qta")
        self.assertEqual([g["vehicle"] for g in data["groups"]], ["QTA-9"])

        data = report_service.vehicle_wise_report(from_date=D2, to_date=D2)
        self.assertEqual([g["vehicle"] for g in data["groups"]], ["No Vehicle"])

        with self.assertRaises(InvalidRangeError):
            report_service.vehicle_wise_report(from_date=D2, to_date=D1)

    def test_document_search(self):
        data = report_service.search_documents(gd_no="2024-15")
        self.assertEqual([(r["kind"], r["id"]) for r in data["rows"]], [("export", self.exp.id)])

        data = report_service.search_documents(invoice_no="inv")
        self.assertEqual([r["invoice_no"] for r in data["rows"]], ["INV001"])

        with self.assertRaises(InvalidQueryError):
            report_service.search_documents()

    def test_dashboard(self):
        create_cashbook_entry(account_id=self.party.id, amount="70", pay_status="CREDIT", entry_date=D1)
        create_cashbook_entry(account_id=self.party.id, amount="20", pay_status="DEBIT", entry_date=D1)
        create_cashbook_entry(account_id=self.party.id, amount="999", pay_status="CREDIT", entry_date=D2)

        data = report_service.dashboard(day=D1)

        self.assertEqual(data["cashbook"], {"count": 2, "credit": "70.00", "debit": "20.00", "cash_in_hand": "50.00"})
        self.assertEqual(data["imports"], {"count": 1, "total": "100.00"})
        self.assertEqual(data["exports"], {"count": 1, "total": "300.00"})
        self.assertEqual(data["invoices"], {"count": 0, "total": "0.00"})
        self.assertEqual(data["accounts"], {"total": 2, "active": 1, "inactive": 1})


class ValidateLedgerCommandTests(TestCase):
    """
    GUARANTEES:
    - A consistent ledger validates clean
    - A missing posting fails --strict
    """

    def setUp(self):
        party = create_account(account_name="Validated Party", sub_head=Account.IMPORT_PARTIES)
        create_cashbook_entry(account_id=party.id, amount="5", pay_status="DEBIT", entry_date=D1)
        self.imp = create_trade_entry(
            "import",
            account_id=party.id,
            bags_qty=Decimal("1"),
            weight_per_bag=Decimal("1"),
            rate_per_kg=Decimal("9"),
            entry_date=D1,
        )

    def test_clean_ledger_passes(self):
        out = StringIO()
        call_command("validate_ledger", "--strict", stdout=out, stderr=StringIO())
        self.assertIn("VALIDATION PASSED", out.getvalue())

    def test_missing_posting_fails_strict(self):
        LedgerEntry.objects.filter(reference_type=LedgerEntry.REF_IMPORT, reference_id=str(self.imp.id)).soft_delete()

        err = StringIO()
        with self.assertRaises(SystemExit):
            call_command("validate_ledger", "--strict", stdout=StringIO(), stderr=err)

        self.assertIn(f"IMPORT:{self.imp.id} has 0 live posting(s)", err.getvalue())
