# accounting/tests/test_posting_rules.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry
from accounting.services import balance_service, ledger_store
from accounting.services.account_service import create_account, update_account
from accounting.services.balance_cache import find_drift, refresh_account_balance
from accounting.services.cashbook_service import (
    create_cashbook_entry,
    delete_cashbook_entry,
    update_cashbook_entry,
)
from accounting.services.exceptions import AccountNotFoundError, PostingRuleError
from accounting.services.posting_rules import post_transaction, repost_transaction, reverse_posting
from accounting.transactions import CashbookTx, ExportTx, ImportTx, InvoiceTx

D1 = date(2024, 3, 1)
D2 = date(2024, 3, 2)


def _account(name, **extra):
    fields = {"sub_head": Account.EXPORT_PARTIES, "balance_status": Account.CREDIT, "opening_balance": Decimal("0")}
    fields.update(extra)
    return create_account(account_name=name, **fields)


def _live(reference_type, reference_id):
    return LedgerEntry.objects.live().filter(reference_type=reference_type, reference_id=str(reference_id))


class PostingDirectionTests(TestCase):
    """
    GUARANTEES:
    - Export credits the party, import and invoice debit it
    - Cashbook side follows pay_status
    - Exactly one live posting per reference
    """

    def setUp(self):
        self.account = _account("Direction Party")

    def test_export_credits(self):
        post_transaction(ExportTx(id="1", account_id=self.account.id, entry_date=D1, amount=Decimal("1000")))
        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("1000.00"))

    def test_import_debits(self):
        post_transaction(ImportTx(id="1", account_id=self.account.id, entry_date=D1, amount=Decimal("1000")))
        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("-1000.00"))

    def test_invoice_debits(self):
        entry = post_transaction(InvoiceTx(id="7", account_id=self.account.id, entry_date=D1, amount=Decimal("12.5")))

        self.assertEqual(entry.debit_amount, Decimal("12.50"))
        self.assertEqual(entry.credit_amount, Decimal("0.00"))

    def test_cashbook_side_follows_pay_status(self):
        credit = post_transaction(
            CashbookTx(id="10", account_id=self.account.id, entry_date=D1, pay_status="CREDIT", amount=Decimal("5"))
        )
        debit = post_transaction(
            CashbookTx(id="11", account_id=self.account.id, entry_date=D1, pay_status="DEBIT", amount=Decimal("3"))
        )

        self.assertEqual(credit.signed_amount, Decimal("5.00"))
        self.assertEqual(debit.signed_amount, Decimal("-3.00"))

    def test_duplicate_reference_refused(self):
        tx = ExportTx(id="dup", account_id=self.account.id, entry_date=D1, amount=Decimal("10"))
        post_transaction(tx)

        with self.assertRaises(PostingRuleError):
            post_transaction(tx)

        self.assertEqual(_live(LedgerEntry.REF_EXPORT, "dup").count(), 1)


class PostingValidationTests(TestCase):
    """
    GUARANTEES:
    - Non-positive amounts are refused
    - Inactive or missing accounts are refused
    - A refused posting writes nothing
    """

    def setUp(self):
        self.account = _account("Validation Party")

    def test_zero_amount_refused(self):
        with self.assertRaises(PostingRuleError):
            post_transaction(ImportTx(id="z", account_id=self.account.id, entry_date=D1, amount=Decimal("0")))

        self.assertFalse(LedgerEntry.objects.exists())

    def test_negative_cashbook_amount_refused(self):
        with self.assertRaises(PostingRuleError):
            create_cashbook_entry(account_id=self.account.id, amount="-5", pay_status="CREDIT", entry_date=D1)

    def test_inactive_account_refused(self):
        update_account(self.account.id, is_active=False)

        with self.assertRaises(AccountNotFoundError):
            create_cashbook_entry(account_id=self.account.id, amount="10", pay_status="CREDIT", entry_date=D1)

        self.assertFalse(CashbookEntry.objects.exists())

    def test_missing_account_refused(self):
        with self.assertRaises(AccountNotFoundError):
            post_transaction(ExportTx(id="m", account_id=424242, entry_date=D1, amount=Decimal("1")))

    def test_failed_posting_rolls_back_cashbook_row(self):
        with mock.patch(
            "accounting.services.cashbook_service.post_cashbook_entry",
            side_effect=PostingRuleError("boom"),
        ):
            with self.assertRaises(PostingRuleError):
                create_cashbook_entry(account_id=self.account.id, amount="10", pay_status="CREDIT", entry_date=D1)

        self.assertFalse(CashbookEntry.objects.exists())
        self.assertFalse(LedgerEntry.objects.exists())

    def test_unknown_reference_type_refused(self):
        with self.assertRaises(PostingRuleError):
            reverse_posting("PAYROLL", "1")


class EditReversalTests(TestCase):
    """
    GUARANTEES:
    - Edit = reverse old + write new; one live posting remains
    - The reversed posting is kept (soft-deleted) for audit
    - Moving an entry between accounts refreshes both caches
    """

    def setUp(self):
        self.account = _account("Edit Party")
        self.other = _account("Other Party")

    def test_edit_leaves_single_live_posting(self):
        entry = create_cashbook_entry(account_id=self.account.id, amount="100", pay_status="CREDIT", entry_date=D1)

        update_cashbook_entry(entry.id, amount="250")

        live = _live(LedgerEntry.REF_CASHBOOK, entry.id)
        self.assertEqual(live.count(), 1)
        self.assertEqual(live.get().credit_amount, Decimal("250.00"))
        self.assertEqual(
            LedgerEntry.objects.filter(reference_type=LedgerEntry.REF_CASHBOOK, reference_id=str(entry.id)).count(),
            2,
        )
        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("250.00"))

    def test_edit_flips_side(self):
        entry = create_cashbook_entry(account_id=self.account.id, amount="40", pay_status="CREDIT", entry_date=D1)

        update_cashbook_entry(entry.id, pay_status="debit")

        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("-40.00"))

    def test_move_between_accounts(self):
        entry = create_cashbook_entry(account_id=self.account.id, amount="60", pay_status="CREDIT", entry_date=D1)

        update_cashbook_entry(entry.id, account_id=self.other.id)

        self.account.refresh_from_db()
        self.other.refresh_from_db()
        self.assertEqual(self.account.current_balance, Decimal("0.00"))
        self.assertEqual(self.other.current_balance, Decimal("60.00"))

    def test_move_locks_both_accounts_in_id_order(self):
        entry = create_cashbook_entry(account_id=self.other.id, amount="15", pay_status="CREDIT", entry_date=D1)

        with mock.patch.object(ledger_store, "lock_accounts", wraps=ledger_store.lock_accounts) as lock:
            update_cashbook_entry(entry.id, account_id=self.account.id)

        lock.assert_called_once_with([self.other.id, self.account.id])
        locked = ledger_store.lock_accounts([self.other.id, self.account.id])
        self.assertEqual([a.id for a in locked], sorted([self.account.id, self.other.id]))

    def test_repost_without_prior_posting_just_writes(self):
        repost_transaction(ExportTx(id="fresh", account_id=self.account.id, entry_date=D2, amount=Decimal("9")))
        self.assertEqual(_live(LedgerEntry.REF_EXPORT, "fresh").count(), 1)

    def test_delete_reverses_posting(self):
        entry = create_cashbook_entry(account_id=self.account.id, amount="75", pay_status="DEBIT", entry_date=D1)

        delete_cashbook_entry(entry.id)

        self.assertFalse(_live(LedgerEntry.REF_CASHBOOK, entry.id).exists())
        reversed_entry = LedgerEntry.objects.get(reference_type=LedgerEntry.REF_CASHBOOK, reference_id=str(entry.id))
        self.assertTrue(reversed_entry.is_deleted)
        self.assertIsNotNone(reversed_entry.deleted_at)


class BalanceCacheTests(TestCase):
    """
    GUARANTEES:
    - current_balance equals the ledger balance after every write
    - balance_after is the running balance at that cashbook row
    - Drift is detected and repaired by a forced refresh
    """

    def setUp(self):
        self.account = _account("Cache Party", opening_balance=Decimal("100.00"), balance_status=Account.DEBIT)

    def test_cache_tracks_ledger(self):
        first = create_cashbook_entry(account_id=self.account.id, amount="300", pay_status="CREDIT", entry_date=D1)
        second = create_cashbook_entry(account_id=self.account.id, amount="50", pay_status="DEBIT", entry_date=D2)

        self.account.refresh_from_db()
        self.assertEqual(self.account.current_balance, balance_service.account_balance(self.account.id))
        self.assertEqual(self.account.current_balance, Decimal("150.00"))

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.balance_after, Decimal("200.00"))
        self.assertEqual(second.balance_after, Decimal("150.00"))

    def test_backdated_entry_updates_later_rows(self):
        later = create_cashbook_entry(account_id=self.account.id, amount="50", pay_status="CREDIT", entry_date=D2)
        create_cashbook_entry(account_id=self.account.id, amount="20", pay_status="CREDIT", entry_date=D1)

        later.refresh_from_db()
        self.assertEqual(later.balance_after, Decimal("-30.00"))

    def test_opening_change_refreshes_cache(self):
        update_account(self.account.id, balance_status=Account.CREDIT)

        self.account.refresh_from_db()
        self.assertEqual(self.account.current_balance, Decimal("100.00"))

    def test_drift_detected_and_repaired(self):
        create_cashbook_entry(account_id=self.account.id, amount="10", pay_status="CREDIT", entry_date=D1)
        Account.objects.filter(pk=self.account.pk).update(current_balance=Decimal("999.99"))

        drift = find_drift([self.account.id])
        self.assertEqual(len(drift), 1)
        self.assertEqual(drift[0].computed, Decimal("-90.00"))

        refresh_account_balance(self.account.id, force=True)
        self.assertEqual(find_drift([self.account.id]), [])

    @override_settings(LEDGER_BALANCE_CACHE_ENABLED=False)
    def test_cache_disabled_leaves_stored_balance(self):
        create_cashbook_entry(account_id=self.account.id, amount="10", pay_status="CREDIT", entry_date=D1)

        self.account.refresh_from_db()
        self.assertEqual(self.account.current_balance, Decimal("-100.00"))
        self.assertEqual(balance_service.account_balance(self.account.id), Decimal("-90.00"))


class LedgerImmutabilityTests(TestCase):
    """
    GUARANTEES:
    - A saved ledger entry cannot be modified or hard-deleted
    """

    def setUp(self):
        account = _account("Immutable Party")
        self.entry = post_transaction(ExportTx(id="i", account_id=account.id, entry_date=D1, amount=Decimal("1")))

    def test_cannot_modify(self):
        self.entry.credit_amount = Decimal("2.00")
        with self.assertRaises(ValidationError):
            self.entry.save()

    def test_cannot_delete(self):
        with self.assertRaises(ValidationError):
            self.entry.delete()
