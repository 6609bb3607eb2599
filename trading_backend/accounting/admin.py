# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.activity import ActivityLog
from accounting.models.cashbook import CashbookEntry
from accounting.models.ledger import LedgerEntry

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "account_name",
        "sub_head",
        "balance_status",
        "opening_balance",
        "current_balance",
        "is_active",
    )
    list_filter = ("sub_head", "balance_status", "limit_status", "is_active")
    search_fields = ("account_name", "cell_no", "ntn_number")
    ordering = ("sub_head", "account_name")
    readonly_fields = ("current_balance", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("account_name", "sub_head", "cell_no", "ntn_number", "address"),
            },
        ),
        (
            "Balances",
            {
                "fields": ("balance_status", "opening_balance", "current_balance"),
            },
        ),
        (
            "Limits",
            {
                "fields": ("limit_status", "limit_amount"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active", "remarks"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# CASHBOOK (READ-ONLY: edits must go through the posting service)
# ============================================================


@admin.register(CashbookEntry)
class CashbookEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "entry_date",
        "account",
        "pay_status",
        "amount",
        "balance_after",
        "is_deleted",
    )
    list_filter = ("pay_status", "is_deleted", "entry_date")
    search_fields = ("account__account_name", "payment_detail")
    ordering = ("-entry_date", "-id")

    readonly_fields = (
        "account",
        "entry_date",
        "pay_status",
        "amount",
        "payment_detail",
        "remarks",
        "balance_after",
        "is_deleted",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# LEDGER ENTRY (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "entry_date",
        "account",
        "credit_amount",
        "debit_amount",
        "reference_type",
        "reference_id",
        "is_deleted",
    )
    list_filter = ("reference_type", "is_deleted")
    search_fields = ("account__account_name", "reference_id", "detail")
    ordering = ("entry_date", "created_at", "id")

    readonly_fields = (
        "account",
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

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# ACTIVITY LOG (APPEND-ONLY)
# ============================================================


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "entity", "entity_id", "performed_by")
    list_filter = ("action", "entity")
    search_fields = ("description", "performed_by")
    ordering = ("-created_at",)
    readonly_fields = ("action", "entity", "entity_id", "description", "performed_by", "metadata", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
