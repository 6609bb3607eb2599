# accounting/tests/test_balance_engine.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.models.account import Account
from accounting.services import balance_service, report_service
from accounting.services.account_service import create_account
from accounting.services.cashbook_service import create_cashbook_entry, delete_cashbook_entry
from accounting.services.exceptions import InvalidRangeError, NotFoundError
from accounting.services.posting_rules import post_transaction
from accounting.transactions import ExportTx, ImportTx

D1 = date(2024, 1, 1)
D2 = date(2024, 1, 2)
D3 = date(2024, 1, 3)


def _account(name="Party", *, opening="0.00", status=Account.CREDIT, sub_head=Account.EXPORT_PARTIES):
    return create_account(
        account_name=name,
        sub_head=sub_head,
        balance_status=status,
        opening_balance=Decimal(opening),
    )


def _cash(account, amount, pay_status, day):
    return create_cashbook_entry(
        account_id=account.id,
        amount=Decimal(amount),
        pay_status=pay_status,
        entry_date=day,
    )


class LedgerStatementTests(TestCase):
    """
    GUARANTEES:
    - Statement opening = balance strictly before from_date
    - Running balance per row, totals over rows only
    - Soft-deleted entries never contribute
    """

    def setUp(self):
        self.account = _account("Kabul Traders", opening="1000.00", status=Account.CREDIT)
        _cash(self.account, "200.00", "CREDIT", D1)
        _cash(self.account, "50.00", "DEBIT", D2)
        _cash(self.account, "300.00", "CREDIT", D3)

    def test_statement_over_full_range(self):
        st = balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D3)

        self.assertEqual(st.opening_balance, Decimal("1000.00"))
        self.assertEqual(
            [row.balance for row in st.rows],
            [Decimal("1200.00"), Decimal("1150.00"), Decimal("1450.00")],
        )
        self.assertEqual(st.total_credit, Decimal("500.00"))
        self.assertEqual(st.total_debit, Decimal("50.00"))
        self.assertEqual(st.closing_balance, Decimal("1450.00"))

    def test_statement_opening_carries_prior_entries(self):
        st = balance_service.ledger_statement(self.account.id, from_date=D2, to_date=D3)

        self.assertEqual(st.opening_balance, Decimal("1200.00"))
        self.assertEqual(len(st.rows), 2)
        self.assertEqual(st.closing_balance, Decimal("1450.00"))

    def test_closing_equals_point_in_time_balance(self):
        st = balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D2)

        self.assertEqual(st.closing_balance, balance_service.account_balance(self.account.id, as_of=D2))
        self.assertEqual(balance_service.account_balance(self.account.id, as_of=D2), Decimal("1150.00"))

    def test_range_additivity(self):
        first = balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D2)
        second = balance_service.ledger_statement(self.account.id, from_date=D3, to_date=D3)

        self.assertEqual(second.opening_balance, first.closing_balance)
        self.assertEqual(
            first.total_credit + second.total_credit,
            balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D3).total_credit,
        )

    def test_reads_are_idempotent(self):
        first_balance = balance_service.account_balance(self.account.id, as_of=D2)
        first_statement = balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D3)

        self.assertEqual(balance_service.account_balance(self.account.id, as_of=D2), first_balance)
        self.assertEqual(
            balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D3),
            first_statement,
        )

    def test_statement_from_first_representable_day(self):
        st = balance_service.ledger_statement(self.account.id, from_date=date.min, to_date=D3)

        self.assertEqual(st.opening_balance, Decimal("1000.00"))
        self.assertEqual(len(st.rows), 3)
        self.assertEqual(st.closing_balance, Decimal("1450.00"))

    def test_soft_deleted_entries_are_excluded(self):
        extra = _cash(self.account, "999.00", "CREDIT", D2)
        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("2449.00"))

        delete_cashbook_entry(extra.id)

        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("1450.00"))
        st = balance_service.ledger_statement(self.account.id, from_date=D1, to_date=D3)
        self.assertEqual(len(st.rows), 3)

    def test_inverted_range_is_rejected(self):
        with self.assertRaises(InvalidRangeError):
            balance_service.ledger_statement(self.account.id, from_date=D3, to_date=D1)

    def test_unknown_account(self):
        with self.assertRaises(NotFoundError):
            balance_service.account_balance(999999)


class OpeningBalanceSignTests(TestCase):
    """
    GUARANTEES:
    - CREDIT opening counts positive, DEBIT opening counts negative
    - An account with no entries has balance = signed opening
    """

    def test_credit_opening_is_positive(self):
        acc = _account("Credit Opening", opening="500.00", status=Account.CREDIT)
        self.assertEqual(balance_service.account_balance(acc.id), Decimal("500.00"))

    def test_debit_opening_is_negative(self):
        acc = _account("Debit Opening", opening="500.00", status=Account.DEBIT)
        self.assertEqual(balance_service.account_balance(acc.id), Decimal("-500.00"))

    def test_as_of_before_any_entry(self):
        acc = _account("Quiet", opening="10.00", status=Account.DEBIT)
        _cash(acc, "25.00", "CREDIT", D3)

        self.assertEqual(balance_service.account_balance(acc.id, as_of=D1), Decimal("-10.00"))
        self.assertEqual(balance_service.account_balance(acc.id), Decimal("15.00"))


class AggregateBalanceTests(TestCase):
    """
    GUARANTEES:
    - Cash in hand = Σ cashbook CREDIT − Σ cashbook DEBIT (live rows only)
    - Trade postings do not move cash in hand
    - Sub-head buckets cover every sub-head
    """

    def setUp(self):
        self.bank = _account("Bank A", sub_head=Account.BANKS)
        self.party = _account("Import Party", sub_head=Account.IMPORT_PARTIES)

    def test_cash_in_hand(self):
        _cash(self.bank, "1000.00", "CREDIT", D1)
        gone = _cash(self.bank, "400.00", "DEBIT", D2)
        _cash(self.party, "150.00", "DEBIT", D2)
        delete_cashbook_entry(gone.id)

        post_transaction(ImportTx(id="IMP-1", account_id=self.party.id, entry_date=D2, amount=Decimal("5000")))

        self.assertEqual(balance_service.cash_in_hand(), Decimal("850.00"))
        self.assertEqual(balance_service.cash_in_hand(from_date=D2, to_date=D2), Decimal("-150.00"))

    def test_sub_head_buckets(self):
        post_transaction(ExportTx(id="EXP-1", account_id=self.bank.id, entry_date=D1, amount=Decimal("300")))
        post_transaction(ImportTx(id="IMP-2", account_id=self.party.id, entry_date=D1, amount=Decimal("120")))

        buckets = balance_service.sub_head_balances()

        self.assertEqual({code for code, _ in Account.SUB_HEADS}, set(buckets))
        self.assertEqual(buckets[Account.BANKS]["credit"], Decimal("300.00"))
        self.assertEqual(buckets[Account.IMPORT_PARTIES]["debit"], Decimal("120.00"))
        self.assertEqual(buckets[Account.PERSONALS]["accounts"], 0)

    def test_bulk_balances_match_single(self):
        post_transaction(ExportTx(id="EXP-2", account_id=self.bank.id, entry_date=D1, amount=Decimal("70")))

        bulk = balance_service.account_balances([self.bank, self.party])

        self.assertEqual(bulk[self.bank.id], balance_service.account_balance(self.bank.id))
        self.assertEqual(bulk[self.party.id], Decimal("0.00"))

    def test_zero_balance_counts_in_sub_heads_but_not_in_accounts_report(self):
        _cash(self.bank, "10.00", "CREDIT", D1)

        buckets = balance_service.sub_head_balances()
        self.assertEqual(buckets[Account.BANKS]["credit"], Decimal("10.00"))
        self.assertEqual(buckets[Account.IMPORT_PARTIES]["accounts"], 1)
        self.assertEqual(buckets[Account.IMPORT_PARTIES]["credit"], Decimal("0.00"))

        report = report_service.accounts_balance_report()
        self.assertEqual([r["account_name"] for r in report["rows"]], ["Bank A"])
        self.assertEqual(report["total_credit"], "10.00")
