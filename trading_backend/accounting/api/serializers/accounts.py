# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account
from accounting.statement import balance_label


class AccountSerializer(serializers.ModelSerializer):
    """
    Output serializer. current_balance is the cached running balance.
    """

    sub_head_label = serializers.CharField(source="get_sub_head_display", read_only=True)
    current_balance_label = serializers.SerializerMethodField()

    class Meta:
        model = Account
        fields = (
            "id",
            "account_name",
            "sub_head",
            "sub_head_label",
            "balance_status",
            "opening_balance",
            "current_balance",
            "current_balance_label",
            "cell_no",
            "ntn_number",
            "address",
            "limit_status",
            "limit_amount",
            "remarks",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_current_balance_label(self, obj) -> str:
        return balance_label(obj.current_balance)


class AccountWriteSerializer(serializers.Serializer):
    """
    Input serializer for create (full) and update (partial=True).
    """

    account_name = serializers.CharField(max_length=150)
    sub_head = serializers.ChoiceField(choices=Account.SUB_HEADS)
    balance_status = serializers.ChoiceField(choices=Account.BALANCE_STATUSES, required=False)
    opening_balance = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)

    cell_no = serializers.CharField(max_length=32, required=False, allow_blank=True)
    ntn_number = serializers.CharField(max_length=32, required=False, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)

    limit_status = serializers.ChoiceField(choices=Account.LIMIT_STATUSES, required=False)
    limit_amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)

    remarks = serializers.CharField(required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)

    def validate_account_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("account_name is required")
        return v

    def validate_opening_balance(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError(
                "opening_balance must be >= 0; use balance_status for the side"
            )
        return value

    def validate_limit_amount(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("limit_amount must be >= 0")
        return value


class AccountBalanceSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    account_name = serializers.CharField()
    as_of = serializers.DateField(allow_null=True)
    balance = serializers.DecimalField(max_digits=14, decimal_places=2)
    label = serializers.CharField()
