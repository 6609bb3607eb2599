# accounting/management/commands/seed_demo_accounts.py

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from accounting.models.account import Account
from accounting.services.account_service import create_account

DEMO_ACCOUNTS = [
    ("Meezan Bank", Account.BANKS, Account.DEBIT, "250000.00"),
    ("Dollar Ledger", Account.DOLLAR_LEDGERS, Account.CREDIT, "0.00"),
    ("Kabul Fresh Traders", Account.EXPORT_PARTIES, Account.DEBIT, "120000.00"),
    ("Quetta Dry Fruit Co", Account.IMPORT_PARTIES, Account.CREDIT, "80000.00"),
    ("Taftan Border Charges", Account.NLC_TAFTAN_EXPENSE_LEDGERS, Account.CREDIT, "0.00"),
    ("Owner Personal", Account.PERSONALS, Account.CREDIT, "50000.00"),
]


class Command(BaseCommand):
    help = "Seed one demo account per sub-head (idempotent by account name)."

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding demo accounts...")

        created = 0
        for name, sub_head, status, opening in DEMO_ACCOUNTS:
            if Account.objects.filter(account_name=name, is_active=True).exists():
                continue
            create_account(
                account_name=name,
                sub_head=sub_head,
                balance_status=status,
                opening_balance=Decimal(opening),
            )
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Demo accounts seeded ({created} created)."))
