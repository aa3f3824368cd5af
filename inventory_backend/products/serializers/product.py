# products/serializers/product.py

"""
PRODUCT SERIALIZERS

Purpose:
- Input validation for create/update (field rules only).
- Business rules (duplicate names, optimistic version check) live in
  products.services.catalog so they raise domain errors (409, not 400).
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Product

MAX_STOCK = 2**31 - 1


class ProductSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=200, trim_whitespace=True)
    category = serializers.CharField(max_length=100, trim_whitespace=True)
    supplier = serializers.CharField(
        max_length=150,
        required=False,
        allow_null=True,
        allow_blank=True,
        trim_whitespace=True,
    )
    unit_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
    )
    stock = serializers.IntegerField(min_value=0, max_value=MAX_STOCK)
    version = serializers.IntegerField(required=False, min_value=0)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "category",
            "supplier",
            "unit_price",
            "stock",
            "created_at",
            "version",
        ]
        read_only_fields = ["id", "created_at"]


class ProductPageSerializer(serializers.Serializer):
    content = ProductSerializer(many=True)
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    total_elements = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    first = serializers.BooleanField()
    last = serializers.BooleanField()


class SyncResultSerializer(serializers.Serializer):
    total_synced = serializers.IntegerField()
    message = serializers.CharField()
