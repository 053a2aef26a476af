"""
Django admin configuration for artists.
"""

from django.contrib import admin

from artists.models import Artist


@admin.register(Artist)
class ArtistAdmin(admin.ModelAdmin):
    """Artists with their wallet balance (read-only, ledger-managed)."""

    list_display = ("name", "user", "wallet_balance", "created_at")
    search_fields = ("name", "user__email")
    readonly_fields = ("id", "wallet_balance", "created_at", "updated_at")
    raw_id_fields = ("user",)
