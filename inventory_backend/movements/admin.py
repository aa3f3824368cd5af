# movements/admin.py
"""
Ledger rows are read-only in the admin: no add, no change, no delete.
New movements go through StockMovementService (API).
"""

from __future__ import annotations

from django.contrib import admin

from movements.models import StockMovement


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "product",
        "movement_type",
        "quantity",
        "stock_before",
        "stock_after",
        "performed_by",
        "created_at",
    )
    list_filter = ("movement_type",)
    search_fields = ("product__name",)
    ordering = ("-created_at",)
    list_select_related = ("product", "performed_by")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
