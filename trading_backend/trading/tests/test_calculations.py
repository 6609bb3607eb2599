# trading/tests/test_calculations.py

from decimal import Decimal

from django.test import SimpleTestCase

from trading.calculations import (
    TradeCalculationError,
    goods_figures,
    invoice_figures,
    next_number,
)


class GoodsFiguresTests(SimpleTestCase):
    """
    GUARANTEES:
    - total_weight = bags × weight per bag (3dp)
    - amount = total_weight × rate (2dp, half-up)
    """

    def test_import_export_figures(self):
        f = goods_figures(bags_qty="100", weight_per_bag="50", rate_per_kg="2.5")

        self.assertEqual(f.total_weight, Decimal("5000.000"))
        self.assertEqual(f.amount, Decimal("12500.00"))

    def test_rounding(self):
        f = goods_figures(bags_qty="3", weight_per_bag="0.3335", rate_per_kg="1.005")

        self.assertEqual(f.total_weight, Decimal("1.001"))
        self.assertEqual(f.amount, Decimal("1.01"))

    def test_blank_values_count_as_zero(self):
        f = goods_figures(bags_qty=None, weight_per_bag="", rate_per_kg="9")
        self.assertEqual(f.amount, Decimal("0.00"))

    def test_negative_rejected(self):
        with self.assertRaises(TradeCalculationError):
            goods_figures(bags_qty="-1", weight_per_bag="10", rate_per_kg="1")

    def test_garbage_rejected(self):
        with self.assertRaises(TradeCalculationError):
            goods_figures(bags_qty="ten", weight_per_bag="10", rate_per_kg="1")


class InvoiceFiguresTests(SimpleTestCase):
    """
    GUARANTEES:
    - bags unit multiplies by weight per bag; kg / litre take the quantity as weight
    - adjustments are added to the amount
    """

    def test_bags_unit(self):
        f = invoice_figures(weight_unit="bags", bags_qty="10", weight_per_bag="40", rate_per_kg="3")

        self.assertEqual(f.total_weight, Decimal("400.000"))
        self.assertEqual(f.amount, Decimal("1200.00"))

    def test_kg_unit_ignores_weight_per_bag(self):
        f = invoice_figures(weight_unit="KG", bags_qty="250", weight_per_bag="40", rate_per_kg="2")

        self.assertEqual(f.total_weight, Decimal("250.000"))
        self.assertEqual(f.amount, Decimal("500.00"))

    def test_adjustments_added(self):
        f = invoice_figures(
            weight_unit="litre",
            bags_qty="100",
            weight_per_bag="0",
            rate_per_kg="1",
            adjustments={"bardana": "10", "mazdoori": "5.50", "tol": None},
        )
        self.assertEqual(f.amount, Decimal("115.50"))

    def test_unknown_unit_rejected(self):
        with self.assertRaises(TradeCalculationError):
            invoice_figures(weight_unit="tonnes", bags_qty="1", weight_per_bag="1", rate_per_kg="1")


class NextNumberTests(SimpleTestCase):
    def test_first_number(self):
        self.assertEqual(next_number("IMP", []), "IMP001")

    def test_max_plus_one(self):
        self.assertEqual(next_number("HAH", ["HAH001", "HAH009", "HAH003"]), "HAH010")

    def test_ignores_other_prefixes_and_manual_numbers(self):
        self.assertEqual(next_number("INV", ["IMP050", "INV002", "INV-X", "INVOICE7"]), "INV003")

    def test_widens_past_three_digits(self):
        self.assertEqual(next_number("IMP", ["IMP999"]), "IMP1000")
