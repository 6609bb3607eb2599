# accounting/tests/test_statement.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from accounting.statement import (
    balance_label,
    fold_statement,
    running_balances,
    signed_opening,
    split_balance,
)
from accounting.transactions import (
    CashbookTx,
    ExportTx,
    ImportTx,
    InvoiceTx,
    TransactionError,
    posting_side,
    reference_type_of,
    to_money,
)


@dataclass
class _Row:
    id: int
    entry_date: date
    credit_amount: Decimal
    debit_amount: Decimal
    detail: str = ""


class StatementFoldTests(SimpleTestCase):
    """
    GUARANTEES:
    - Running balance = opening + Σ(credit − debit), row by row, in input order
    - Totals cover rows only
    - Zero reads as Credit
    """

    def test_running_balance_rows_and_totals(self):
        rows = [
            _Row(1, date(2024, 1, 1), Decimal("200.00"), Decimal("0.00")),
            _Row(2, date(2024, 1, 2), Decimal("0.00"), Decimal("50.00")),
            _Row(3, date(2024, 1, 3), Decimal("300.00"), Decimal("0.00")),
        ]

        st = fold_statement(
            account_id=7,
            from_date=date(2024, 1, 1),
            to_date=date(2024, 1, 3),
            opening_balance=Decimal("1000.00"),
            entries=rows,
        )

        self.assertEqual([r.balance for r in st.rows], [Decimal("1200.00"), Decimal("1150.00"), Decimal("1450.00")])
        self.assertEqual(st.total_credit, Decimal("500.00"))
        self.assertEqual(st.total_debit, Decimal("50.00"))
        self.assertEqual(st.closing_balance, Decimal("1450.00"))
        self.assertEqual(st.closing_label, "Cr")

    def test_empty_range_closes_at_opening(self):
        st = fold_statement(
            account_id=1,
            from_date=date(2024, 2, 1),
            to_date=date(2024, 2, 29),
            opening_balance=Decimal("-75.50"),
            entries=[],
        )

        self.assertEqual(st.rows, ())
        self.assertEqual(st.closing_balance, Decimal("-75.50"))
        self.assertEqual(st.opening_label, "Dr")
        self.assertEqual(st.total_credit, Decimal("0.00"))

    def test_fold_keeps_input_order(self):
        rows = [
            _Row(9, date(2024, 1, 5), Decimal("0.00"), Decimal("100.00")),
            _Row(3, date(2024, 1, 5), Decimal("40.00"), Decimal("0.00")),
        ]

        out = running_balances(opening_balance=Decimal("0.00"), entries=rows)

        self.assertEqual([e.id for e, _bal in out], [9, 3])
        self.assertEqual([bal for _e, bal in out], [Decimal("-100.00"), Decimal("-60.00")])

    def test_labels_and_split(self):
        self.assertEqual(balance_label(Decimal("0.00")), "Cr")
        self.assertEqual(balance_label(Decimal("-0.01")), "Dr")
        self.assertEqual(split_balance(Decimal("-12.30")), (Decimal("0.00"), Decimal("12.30")))
        self.assertEqual(split_balance(Decimal("5")), (Decimal("5.00"), Decimal("0.00")))

    def test_signed_opening(self):
        self.assertEqual(signed_opening(opening_balance="1000", balance_status="CREDIT"), Decimal("1000.00"))
        self.assertEqual(signed_opening(opening_balance="1000", balance_status="DEBIT"), Decimal("-1000.00"))


class TransactionRulesTests(SimpleTestCase):
    """
    GUARANTEES:
    - Export posts CREDIT; import and invoice post DEBIT
    - Cashbook side follows pay_status
    - Money rounds half-up to 2dp
    """

    def test_posting_sides(self):
        d = date(2024, 1, 1)
        self.assertEqual(posting_side(ExportTx(id="1", account_id=1, entry_date=d, amount=Decimal("1"))), "CREDIT")
        self.assertEqual(posting_side(ImportTx(id="1", account_id=1, entry_date=d, amount=Decimal("1"))), "DEBIT")
        self.assertEqual(posting_side(InvoiceTx(id="1", account_id=1, entry_date=d, amount=Decimal("1"))), "DEBIT")
        self.assertEqual(
            posting_side(CashbookTx(id="1", account_id=1, entry_date=d, pay_status="debit", amount=Decimal("1"))),
            "DEBIT",
        )

    def test_bad_pay_status_rejected(self):
        tx = CashbookTx(id="1", account_id=1, entry_date=date(2024, 1, 1), pay_status="BOTH", amount=Decimal("1"))
        with self.assertRaises(TransactionError):
            posting_side(tx)

    def test_reference_types(self):
        d = date(2024, 1, 1)
        self.assertEqual(reference_type_of(ExportTx(id="1", account_id=1, entry_date=d, amount=1)), "EXPORT")
        self.assertEqual(
            reference_type_of(CashbookTx(id="1", account_id=1, entry_date=d, pay_status="CREDIT", amount=1)),
            "CASHBOOK",
        )

    def test_to_money(self):
        self.assertEqual(to_money("10.005"), Decimal("10.01"))
        with self.assertRaises(TransactionError):
            to_money("ten")
        with self.assertRaises(TransactionError):
            to_money("NaN")
