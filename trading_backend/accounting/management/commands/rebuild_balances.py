# accounting/management/commands/rebuild_balances.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from accounting.models.account import Account
from accounting.services.balance_cache import find_drift, refresh_account_balance


class Command(BaseCommand):
    help = "Recompute cached account balances and cashbook running balances from the ledger."

    def add_arguments(self, parser):
        parser.add_argument(
            "--account",
            dest="account_ids",
            type=int,
            action="append",
            help="Only this account id (repeatable).",
        )
        parser.add_argument(
            "--check",
            action="store_true",
            help="Report drift only; write nothing. Non-zero exit if drift is found.",
        )

    def handle(self, *args, **options):
        account_ids = options.get("account_ids") or None
        check_only = bool(options.get("check"))

        if account_ids:
            missing = set(account_ids) - set(Account.objects.filter(id__in=account_ids).values_list("id", flat=True))
            if missing:
                raise CommandError(f"Unknown account id(s): {', '.join(str(i) for i in sorted(missing))}")

        drift = find_drift(account_ids)

        self.stdout.write(self.style.MIGRATE_HEADING("Balance cache check"))
        for d in drift:
            self.stdout.write(
                f"  account={d.account_id} ({d.account_name}) cached={d.cached} "
                f"ledger={d.computed} stale_cashbook_rows={d.stale_cashbook_rows}"
            )

        if not drift:
            self.stdout.write(self.style.SUCCESS("[OK] Cached balances match the ledger"))
            return

        if check_only:
            self.stderr.write(self.style.ERROR(f"[FAIL] {len(drift)} account(s) drifted"))
            raise SystemExit(1)

        for d in drift:
            refresh_account_balance(d.account_id, force=True)

        self.stdout.write(self.style.SUCCESS(f"Rebuilt {len(drift)} account(s)"))
