# movements/models/stock_movement.py

"""
STOCK LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- Created ONCE, never edited
- Quantity bounded to 1..MAX_MOVEMENT_QUANTITY (DB check constraint)
- stock_before / stock_after snapshot the product counter around the movement

The product has no cached back-reference: history is queried on demand
(see movements.services.movement_store.MovementStore).
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from products.models import Product

MAX_MOVEMENT_QUANTITY = 1_000_000


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        INBOUND = "INBOUND", "Inbound"
        OUTBOUND = "OUTBOUND", "Outbound"

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=8, choices=MovementType.choices)

    quantity = models.IntegerField(
        validators=[
            MinValueValidator(1),
            MaxValueValidator(MAX_MOVEMENT_QUANTITY),
        ]
    )

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    stock_before = models.IntegerField(validators=[MinValueValidator(0)])
    stock_after = models.IntegerField(validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["movement_type"], name="movement_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1) & Q(quantity__lte=MAX_MOVEMENT_QUANTITY),
                name="stock_movement_quantity_in_range",
            ),
            models.CheckConstraint(
                condition=Q(stock_before__gte=0) & Q(stock_after__gte=0),
                name="stock_movement_snapshots_non_negative",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return f"{product_name} | {self.movement_type} | {self.quantity}"
