# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:
- Catalog fields are editable.
- `version` is shown but never edited by hand; saves go through
  ProductStore so the optimistic check still applies.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product
from products.services.product_store import ProductStore


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "supplier", "unit_price", "stock", "version", "created_at")
    list_filter = ("category", "supplier")
    search_fields = ("name", "category", "supplier")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "version")

    def save_model(self, request, obj, form, change):
        ProductStore().save(obj)
