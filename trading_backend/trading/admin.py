# trading/admin.py

from django.contrib import admin

from trading.models import ExportEntry, ImportEntry, InvoiceEntry, Product, Vehicle

# Documents are read-only here: writes must post to the ledger via trade_service.


class TradeEntryAdmin(admin.ModelAdmin):
    list_display = (
        "invoice_no",
        "entry_date",
        "account",
        "total_weight",
        "amount",
        "vehicle_numbers",
        "is_deleted",
    )
    list_filter = ("is_deleted", "entry_date")
    search_fields = ("invoice_no", "vehicle_numbers", "account__account_name", "product__name")
    ordering = ("-entry_date", "-id")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(ImportEntry)
class ImportEntryAdmin(TradeEntryAdmin):
    search_fields = TradeEntryAdmin.search_fields + ("supplier", "grn_no")


@admin.register(ExportEntry)
class ExportEntryAdmin(TradeEntryAdmin):
    search_fields = TradeEntryAdmin.search_fields + ("gd_no",)


@admin.register(InvoiceEntry)
class InvoiceEntryAdmin(TradeEntryAdmin):
    list_filter = TradeEntryAdmin.list_filter + ("weight_unit",)
    search_fields = TradeEntryAdmin.search_fields + ("supplier", "grn_no")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "description", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name",)
    ordering = ("name",)


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("vehicle_no", "description", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("vehicle_no",)
    ordering = ("vehicle_no",)
