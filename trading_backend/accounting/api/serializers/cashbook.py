# accounting/api/serializers/cashbook.py

from rest_framework import serializers

from accounting.models.cashbook import CashbookEntry


class CashbookEntrySerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth).
    """

    account_name = serializers.CharField(source="account.account_name", read_only=True)

    class Meta:
        model = CashbookEntry
        fields = (
            "id",
            "account",
            "account_name",
            "entry_date",
            "pay_status",
            "amount",
            "payment_detail",
            "remarks",
            "balance_after",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class CashbookEntryWriteSerializer(serializers.Serializer):
    """
    Input serializer for create (full) and edit (partial=True).
    """

    account = serializers.IntegerField(min_value=1)
    entry_date = serializers.DateField(required=False)
    pay_status = serializers.ChoiceField(choices=CashbookEntry.PAY_STATUSES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    payment_detail = serializers.CharField(max_length=255, required=False, allow_blank=True)
    remarks = serializers.CharField(required=False, allow_blank=True)

    def validate_amount(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value

    def to_internal_value(self, data):
        # Accept lower-case pay_status from older clients.
        if hasattr(data, "get") and isinstance(data.get("pay_status"), str):
            data = data.copy()
            data["pay_status"] = data["pay_status"].strip().upper()
        return super().to_internal_value(data)
