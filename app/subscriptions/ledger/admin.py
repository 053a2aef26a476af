"""
Django admin configuration for ledger models.

WalletTransaction is immutable in the admin (no add, change or delete),
and PlatformWallet balances are read-only: every change must go through
WalletLedgerService so the transaction log stays complete.
"""

from django.contrib import admin

from .models import PlatformWallet, WalletTransaction


class WalletTransactionInline(admin.TabularInline):
    model = WalletTransaction
    extra = 0
    can_delete = False
    ordering = ["-timestamp"]
    readonly_fields = ["timestamp", "type", "amount", "currency", "description", "reference"]
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PlatformWallet)
class PlatformWalletAdmin(admin.ModelAdmin):
    list_display = ["currency", "balance", "version", "updated_at"]
    readonly_fields = ["id", "currency", "balance", "version", "created_at", "updated_at"]
    inlines = [WalletTransactionInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ["timestamp", "currency", "type", "amount", "reference"]
    list_filter = ["currency", "type"]
    search_fields = ["reference", "description"]
    ordering = ["-timestamp"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
