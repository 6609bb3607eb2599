# accounting/tests/test_activity_log.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from accounting.models.account import Account
from accounting.models.activity import ActivityLog
from accounting.models.cashbook import CashbookEntry
from accounting.services.account_service import create_account
from accounting.services.activity_log_service import SYSTEM_ACTOR, log_activity, recent_activity
from accounting.services.cashbook_service import create_cashbook_entry

User = get_user_model()


class ActivityLogTests(TestCase):
    """
    GUARANTEES:
    - Writes are recorded after commit with the acting username
    - A failing log write never fails the business operation
    - Rolled-back operations leave no audit row
    """

    def setUp(self):
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.account = create_account(
            account_name="Audit Party",
            sub_head=Account.PERSONALS,
            opening_balance=Decimal("0"),
        )

    def test_create_is_logged_with_actor(self):
        with self.captureOnCommitCallbacks(execute=True):
            entry = create_cashbook_entry(
                account_id=self.account.id,
                amount="15",
                pay_status="CREDIT",
                entry_date=date(2024, 5, 1),
                user=self.user,
            )

        log = ActivityLog.objects.get(entity=ActivityLog.ENTITY_CASHBOOK, entity_id=str(entry.id))
        self.assertEqual(log.action, ActivityLog.CREATE)
        self.assertEqual(log.performed_by, "clerk")
        self.assertEqual(log.metadata["amount"], "15.00")

    def test_log_failure_does_not_break_operation(self):
        with mock.patch.object(ActivityLog.objects, "create", side_effect=RuntimeError("audit store down")):
            with self.captureOnCommitCallbacks(execute=True):
                entry = create_cashbook_entry(
                    account_id=self.account.id,
                    amount="20",
                    pay_status="DEBIT",
                    entry_date=date(2024, 5, 2),
                )

        self.assertTrue(CashbookEntry.objects.filter(pk=entry.pk, is_deleted=False).exists())
        self.assertFalse(ActivityLog.objects.filter(entity=ActivityLog.ENTITY_CASHBOOK).exists())

    def test_anonymous_actor_is_system(self):
        with self.captureOnCommitCallbacks(execute=True):
            log_activity(action=ActivityLog.CREATE, entity=ActivityLog.ENTITY_ACCOUNT, entity_id=1)

        self.assertEqual(ActivityLog.objects.get().performed_by, SYSTEM_ACTOR)

    def test_nothing_logged_without_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            log_activity(action=ActivityLog.DELETE, entity=ActivityLog.ENTITY_IMPORT, entity_id=3)

        self.assertEqual(len(callbacks), 1)
        self.assertFalse(ActivityLog.objects.exists())

    @override_settings(ACTIVITY_LOG_ENABLED=False)
    def test_disabled_logging_is_a_no_op(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            log_activity(action=ActivityLog.CREATE, entity=ActivityLog.ENTITY_ACCOUNT, entity_id=1)

        self.assertEqual(callbacks, [])
        self.assertFalse(ActivityLog.objects.exists())

    @override_settings(DASHBOARD_RECENT_LOG_LIMIT=2)
    def test_recent_activity_is_newest_first_and_limited(self):
        with self.captureOnCommitCallbacks(execute=True):
            for i in range(4):
                log_activity(action=ActivityLog.UPDATE, entity=ActivityLog.ENTITY_ACCOUNT, entity_id=i)

        recent = recent_activity()
        self.assertEqual([log.entity_id for log in recent], ["3", "2"])
