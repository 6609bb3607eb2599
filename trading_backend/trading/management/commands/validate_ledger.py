# trading/management/commands/validate_ledger.py

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from django.core.management.base import BaseCommand

from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry
from accounting.services.balance_cache import find_drift
from trading.services.trade_service import KINDS

CREDIT_SIDE = "credit"
DEBIT_SIDE = "debit"

# Side each document type must post on (cashbook follows pay_status).
DOCUMENT_SIDES = {
    LedgerEntry.REF_EXPORT: CREDIT_SIDE,
    LedgerEntry.REF_IMPORT: DEBIT_SIDE,
    LedgerEntry.REF_INVOICE: DEBIT_SIDE,
}


def _side_and_amount(entry: LedgerEntry):
    if entry.credit_amount > Decimal("0.00"):
        return CREDIT_SIDE, entry.credit_amount
    return DEBIT_SIDE, entry.debit_amount


class Command(BaseCommand):
    help = "Validate ledger integrity: one live posting per live document, correct side/amount, cache in sync."

    def add_arguments(self, parser):
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any error is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))

        self.stdout.write(self.style.MIGRATE_HEADING("Ledger Validation"))

        postings = defaultdict(list)
        for entry in LedgerEntry.objects.live().only(
            "id", "account_id", "credit_amount", "debit_amount", "reference_type", "reference_id"
        ):
            postings[(entry.reference_type, entry.reference_id)].append(entry)

        errors = 0
        seen = set()

        # -----------------------------
        # 1) Cashbook rows
        # -----------------------------
        expected = []
        for cb in CashbookEntry.objects.filter(is_deleted=False).only("id", "account_id", "pay_status", "amount"):
            side = CREDIT_SIDE if cb.pay_status == CashbookEntry.CREDIT else DEBIT_SIDE
            expected.append((LedgerEntry.REF_CASHBOOK, str(cb.id), cb.account_id, side, cb.amount))

        # -----------------------------
        # 2) Trade documents
        # -----------------------------
        for kind in KINDS.values():
            side = DOCUMENT_SIDES[kind.reference_type]
            for doc in kind.model.objects.filter(is_deleted=False).only("id", "account_id", "amount"):
                expected.append((kind.reference_type, str(doc.id), doc.account_id, side, doc.amount))

        for ref_type, ref_id, account_id, side, amount in expected:
            key = (ref_type, ref_id)
            seen.add(key)
            found = postings.get(key, [])

            if len(found) != 1:
                errors += 1
                self.stderr.write(self.style.ERROR(f"[FAIL] {ref_type}:{ref_id} has {len(found)} live posting(s)"))
                continue

            entry = found[0]
            got_side, got_amount = _side_and_amount(entry)
            if entry.account_id != account_id or got_side != side or got_amount != amount:
                errors += 1
                self.stderr.write(
                    self.style.ERROR(
                        f"[FAIL] {ref_type}:{ref_id} posting mismatch "
                        f"(account {entry.account_id}/{account_id}, {got_side} {got_amount} vs {side} {amount})"
                    )
                )

        # -----------------------------
        # 3) Orphan postings
        # -----------------------------
        orphans = [key for key in postings if key not in seen]
        for ref_type, ref_id in orphans[:10]:
            self.stderr.write(f"  orphan posting {ref_type}:{ref_id}")
        if orphans:
            errors += len(orphans)
            self.stderr.write(self.style.ERROR(f"[FAIL] Live postings without a live document: {len(orphans)}"))
        else:
            self.stdout.write(self.style.SUCCESS(f"[OK] {len(expected)} document(s) posted exactly once"))

        # -----------------------------
        # 4) Balance cache
        # -----------------------------
        drift = find_drift()
        if drift:
            errors += len(drift)
            self.stderr.write(
                self.style.ERROR(f"[FAIL] Cached balances drifted on {len(drift)} account(s); run rebuild_balances")
            )
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Cached balances match the ledger"))

        self.stdout.write("")
        if errors == 0:
            self.stdout.write(self.style.SUCCESS("VALIDATION PASSED"))
        else:
            self.stderr.write(self.style.ERROR(f"VALIDATION FOUND ISSUES: {errors} problem(s)"))

        return self._exit(strict and errors > 0)

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
