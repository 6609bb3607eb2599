# accounting/api/serializers/ledger_entries.py

from rest_framework import serializers

from accounting.models.activity import ActivityLog
from accounting.models.ledger import LedgerEntry


class LedgerEntrySerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.account_name", read_only=True)

    class Meta:
        model = LedgerEntry
        fields = (
            "id",
            "account",
            "account_name",
            "entry_date",
            "credit_amount",
            "debit_amount",
            "detail",
            "reference_type",
            "reference_id",
            "remarks",
            "is_deleted",
            "deleted_at",
            "created_at",
        )
        read_only_fields = fields


class ActivityLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityLog
        fields = "__all__"
        read_only_fields = ("id",)
