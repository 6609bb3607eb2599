# trading/tests/test_api.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from django.test import TestCase
from rest_framework.test import APIClient

from accounting.models.account import Account
from accounting.services import balance_service
from accounting.services.account_service import create_account
from trading.services.master_data_service import create_vehicle

User = get_user_model()


class TradingAPITests(TestCase):
    """
    GUARANTEES:
    - Import / export / invoice CRUD posts to the ledger
    - Derived figures cannot be supplied by the client
    - Reports, search, numbering and dashboard are reachable
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_superuser(username="admin", password="pass", email="admin@example.com")
        self.client.force_authenticate(user=self.admin)

        self.party = create_account(account_name="API Trade Party", sub_head=Account.EXPORT_PARTIES)
        for number in ("LEA-1", "QTA-9", "KHI-7"):
            create_vehicle(vehicle_no=number)

    def _post(self, kind, payload):
        body = {"account": self.party.id, "entry_date": "2024-08-01"}
        body.update(payload)
        return self.client.post(f"/api/trading/{kind}/", body, format="json")

    def test_import_lifecycle(self):
        res = self._post(
            "imports",
            {
                "bags_qty": "10",
                "weight_per_bag": "50",
                "rate_per_kg": "2",
                "vehicle_numbers": " lea-1 ,qta-9,",
                "amount": "1.00",
            },
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["invoice_no"], "IMP001")
        self.assertEqual(res.data["amount"], "1000.00")
        self.assertEqual(res.data["vehicle_numbers"], "LEA-1, QTA-9")
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("-1000.00"))

        entry_id = res.data["id"]
        res = self.client.patch(f"/api/trading/imports/{entry_id}/", {"rate_per_kg": "3"}, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["amount"], "1500.00")
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("-1500.00"))

        res = self.client.get("/api/trading/imports/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)

        res = self.client.delete(f"/api/trading/imports/{entry_id}/")
        self.assertEqual(res.status_code, 204)
        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("0.00"))
        self.assertEqual(self.client.get(f"/api/trading/imports/{entry_id}/").status_code, 404)

    def test_export_and_invoice(self):
        res = self._post("exports", {"bags_qty": "4", "weight_per_bag": "25", "rate_per_kg": "10", "gd_no": "GD-1"})
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["invoice_no"], "HAH001")

        res = self._post(
            "invoices",
            {"weight_unit": "bags", "bags_qty": "2", "weight_per_bag": "100", "rate_per_kg": "1", "mazdoori": "15"},
        )
        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["invoice_no"], "INV001")
        self.assertEqual(res.data["amount"], "215.00")

        self.assertEqual(balance_service.account_balance(self.party.id), Decimal("785.00"))

    def test_zero_amount_is_400(self):
        res = self._post("imports", {"bags_qty": "10", "weight_per_bag": "10"})
        self.assertEqual(res.status_code, 400)

    def test_unknown_account_is_404(self):
        res = self.client.post(
            "/api/trading/exports/",
            {"account": 999999, "bags_qty": "1", "weight_per_bag": "1", "rate_per_kg": "1"},
            format="json",
        )
        self.assertEqual(res.status_code, 404)

    def test_next_number(self):
        self._post("exports", {"bags_qty": "1", "weight_per_bag": "1", "rate_per_kg": "1"})

        res = self.client.get("/api/trading/next-number/", {"kind": "export"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["invoice_no"], "HAH002")

        res = self.client.get("/api/trading/next-number/", {"kind": "barter"})
        self.assertEqual(res.status_code, 400)

    def test_reports_and_dashboard(self):
        self._post("exports", {"bags_qty": "1", "weight_per_bag": "10", "rate_per_kg": "1", "vehicle_numbers": "KHI-7"})

        res = self.client.get("/api/trading/reports/vehicle-wise/", {"vehicle": "khi"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["groups"][0]["vehicle"], "KHI-7")

        res = self.client.get("/api/trading/search/", {"invoice_no": "hah"})
        self.assertEqual(len(res.data["rows"]), 1)

        res = self.client.get("/api/trading/search/")
        self.assertEqual(res.status_code, 400)

        res = self.client.get("/api/trading/dashboard/", {"date": "2024-08-01"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["exports"], {"count": 1, "total": "10.00"})

    def test_write_requires_model_permission(self):
        viewer = User.objects.create_user(username="viewer", password="pass")
        viewer.user_permissions.add(Permission.objects.get(codename="view_ledgerentry"))

        client = APIClient()
        client.force_authenticate(user=viewer)

        self.assertEqual(client.get("/api/trading/exports/").status_code, 200)

        res = client.post(
            "/api/trading/exports/",
            {"account": self.party.id, "bags_qty": "1", "weight_per_bag": "1", "rate_per_kg": "1"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)
