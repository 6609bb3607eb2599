# trading/api/serializers.py

from decimal import Decimal

from rest_framework import serializers

from trading.calculations import ADJUSTMENT_FIELDS, WEIGHT_UNITS
from trading.models import ExportEntry, ImportEntry, InvoiceEntry, Product, Vehicle

COMMON_OUTPUT_FIELDS = [
    "id",
    "account",
    "account_name",
    "product",
    "product_name",
    "entry_date",
    "invoice_no",
    "bags_qty",
    "weight_per_bag",
    "rate_per_kg",
    "total_weight",
    "amount",
    "vehicle_numbers",
    "remarks",
    "created_at",
    "updated_at",
]


class ImportEntrySerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.account_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)

    class Meta:
        model = ImportEntry
        fields = COMMON_OUTPUT_FIELDS + ["supplier", "grn_no"]
        read_only_fields = fields


class ExportEntrySerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.account_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)

    class Meta:
        model = ExportEntry
        fields = COMMON_OUTPUT_FIELDS + ["gd_no"]
        read_only_fields = fields


class InvoiceEntrySerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source="account.account_name", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True, default=None)

    class Meta:
        model = InvoiceEntry
        fields = COMMON_OUTPUT_FIELDS + ["supplier", "grn_no", "weight_unit"] + list(ADJUSTMENT_FIELDS)
        read_only_fields = fields


def _quantity_field():
    return serializers.DecimalField(
        max_digits=14,
        decimal_places=3,
        min_value=Decimal("0"),
        required=False,
        default=Decimal("0"),
    )


class TradeEntryWriteSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible). total_weight / amount are derived, never accepted.
    """

    account = serializers.IntegerField(min_value=1)
    product = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    entry_date = serializers.DateField(required=False)
    bags_qty = _quantity_field()
    weight_per_bag = _quantity_field()
    rate_per_kg = serializers.DecimalField(
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0"),
        required=False,
        default=Decimal("0"),
    )
    vehicle_numbers = serializers.CharField(max_length=255, required=False, allow_blank=True)
    invoice_no = serializers.CharField(max_length=32, required=False, allow_blank=True)
    remarks = serializers.CharField(required=False, allow_blank=True)

    def validate_invoice_no(self, value):
        return (value or "").strip().upper()

    def validate_vehicle_numbers(self, value):
        parts = [p.strip().upper() for p in (value or "").split(",") if p.strip()]
        return ", ".join(parts)


class ImportEntryWriteSerializer(TradeEntryWriteSerializer):
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True)
    grn_no = serializers.CharField(max_length=64, required=False, allow_blank=True)


class ExportEntryWriteSerializer(TradeEntryWriteSerializer):
    gd_no = serializers.CharField(max_length=64, required=False, allow_blank=True)


class InvoiceEntryWriteSerializer(TradeEntryWriteSerializer):
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True)
    grn_no = serializers.CharField(max_length=64, required=False, allow_blank=True)
    weight_unit = serializers.ChoiceField(choices=WEIGHT_UNITS, required=False, default="kg")

    bardana = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)
    mazdoori = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)
    munshiana = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)
    charsadna = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)
    walai = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)
    tol = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False)


OUTPUT_SERIALIZERS = {
    "import": ImportEntrySerializer,
    "export": ExportEntrySerializer,
    "invoice": InvoiceEntrySerializer,
}

WRITE_SERIALIZERS = {
    "import": ImportEntryWriteSerializer,
    "export": ExportEntryWriteSerializer,
    "invoice": InvoiceEntryWriteSerializer,
}


class VehicleReportQuerySerializer(serializers.Serializer):
    vehicle = serializers.CharField(required=False, allow_blank=True)
    from_date = serializers.DateField(required=False, allow_null=True, default=None)
    to_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        start = attrs.get("from_date")
        end = attrs.get("to_date")
        if start and end and start > end:
            raise serializers.ValidationError({"from_date": "from_date must be on or before to_date"})
        return attrs


class DocumentSearchQuerySerializer(serializers.Serializer):
    gd_no = serializers.CharField(required=False, allow_blank=True)
    invoice_no = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not (attrs.get("gd_no") or "").strip() and not (attrs.get("invoice_no") or "").strip():
            raise serializers.ValidationError("Provide gd_no or invoice_no")
        return attrs


class NextNumberQuerySerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=list(OUTPUT_SERIALIZERS))


class ProductWiseReportQuerySerializer(serializers.Serializer):
    product = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)
    kind = serializers.ChoiceField(choices=list(OUTPUT_SERIALIZERS), required=False, allow_null=True, default=None)
    from_date = serializers.DateField(required=False, allow_null=True, default=None)
    to_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        start = attrs.get("from_date")
        end = attrs.get("to_date")
        if start and end and start > end:
            raise serializers.ValidationError({"from_date": "from_date must be on or before to_date"})
        return attrs


class GoodsReceivedQuerySerializer(serializers.Serializer):
    from_date = serializers.DateField(required=False, allow_null=True, default=None)
    to_date = serializers.DateField(required=False, allow_null=True, default=None)
    account = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)


# ============================================================
# MASTER DATA
# ============================================================


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "description", "is_active", "created_at", "updated_at"]
        read_only_fields = fields


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)

    def validate_name(self, value):
        value = " ".join((value or "").split())
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = ["id", "vehicle_no", "description", "is_active", "created_at", "updated_at"]
        read_only_fields = fields


class VehicleWriteSerializer(serializers.Serializer):
    vehicle_no = serializers.CharField(max_length=32)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    is_active = serializers.BooleanField(required=False)

    def validate_vehicle_no(self, value):
        value = "".join((value or "").split()).upper()
        if not value:
            raise serializers.ValidationError("Vehicle number is required")
        if "," in value:
            raise serializers.ValidationError("Vehicle number cannot contain a comma")
        return value


class MasterDataQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    active = serializers.BooleanField(required=False, default=False)
