from django.contrib import admin

from gold.models import (
    Address,
    Payment,
    PhysicalGoldTransaction,
    TransactionHistory,
    User,
    Vendor,
    VendorBranch,
    VirtualGoldHolding,
)


class ReadOnlyAdminMixin:
    """
    Mixin for append-only records: browsable, never added, changed or
    deleted from the admin.
    """

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("id", "street", "city", "state", "country", "postal_code")
    list_filter = ("country", "state")
    search_fields = ("street", "city")


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "address", "created_at")
    search_fields = ("name", "email")


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "current_gold_price", "price_updated_at")
    search_fields = ("name",)
    readonly_fields = ("price_updated_at",)


@admin.register(VendorBranch)
class VendorBranchAdmin(admin.ModelAdmin):
    list_display = ("id", "vendor", "address", "quantity", "updated_at")
    list_filter = ("vendor",)
    search_fields = ("address__city", "vendor__name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(VirtualGoldHolding)
class VirtualGoldHoldingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "branch", "quantity", "updated_at")
    search_fields = ("user__email",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(PhysicalGoldTransaction)
class PhysicalGoldTransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ("id", "user", "branch", "delivery_address", "quantity", "created_at")
    search_fields = ("user__email",)
    readonly_fields = ("user", "branch", "delivery_address", "quantity", "created_at")


@admin.register(TransactionHistory)
class TransactionHistoryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "branch",
        "transaction_type",
        "transaction_status",
        "quantity",
        "amount",
        "created_at",
    )
    list_filter = ("transaction_type", "transaction_status")
    search_fields = ("user__email",)
    readonly_fields = (
        "user",
        "branch",
        "transaction_type",
        "transaction_status",
        "quantity",
        "amount",
        "created_at",
    )


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "amount", "payment_method", "payment_status", "created_at")
    list_filter = ("payment_method", "payment_status")
    search_fields = ("user__email",)
    readonly_fields = ("created_at", "updated_at")
