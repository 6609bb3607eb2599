# accounting/api/serializers/reports.py

from rest_framework import serializers

from accounting.models.account import Account
from accounting.services.report_service import REPORT_TYPES


class DateRangeQuerySerializer(serializers.Serializer):
    """
    Optional ?from_date=YYYY-MM-DD&to_date=YYYY-MM-DD (either end may be omitted).
    """

    from_date = serializers.DateField(required=False, allow_null=True, default=None)
    to_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        start = attrs.get("from_date")
        end = attrs.get("to_date")
        if start and end and start > end:
            raise serializers.ValidationError({"from_date": "from_date must be on or before to_date"})
        return attrs


class RequiredDateRangeQuerySerializer(DateRangeQuerySerializer):
    from_date = serializers.DateField()
    to_date = serializers.DateField()


class AsOfQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False, allow_null=True, default=None)


class AccountsBalanceQuerySerializer(AsOfQuerySerializer):
    sub_head = serializers.ChoiceField(choices=Account.SUB_HEADS, required=False)


class CreditDebitQuerySerializer(DateRangeQuerySerializer):
    type = serializers.ChoiceField(choices=REPORT_TYPES, required=False, default="all")


class CashbookReportQuerySerializer(DateRangeQuerySerializer):
    account = serializers.IntegerField(min_value=1)


class DashboardQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True, default=None)
