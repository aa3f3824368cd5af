# products/models/product.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class Product(models.Model):
    """
    Represents a catalog product.

    STOCK MODEL (IMPORTANT):
    - Product stores its current stock as a plain counter.
    - The stock ledger (movements app) is the audited way to change it.
    - `version` is bumped on every successful update; writers compare-and-swap
      on it (see products.services.product_store.ProductStore.save).
    """

    name = models.CharField(max_length=200, unique=True)
    category = models.CharField(max_length=100, db_index=True)
    supplier = models.CharField(max_length=150, null=True, blank=True)

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)

    version = models.IntegerField(default=0, editable=False)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock__gte=0),
                name="product_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0),
                name="product_unit_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.category})"

    def clean(self):
        self.name = (self.name or "").strip()
        self.category = (self.category or "").strip()
        if self.supplier is not None:
            self.supplier = self.supplier.strip() or None
