# movements/services/movement_store.py

from __future__ import annotations

from typing import Optional

from movements.models import StockMovement


class MovementStore:
    """Persistence for ledger rows. Insert + read only."""

    def save(self, movement: StockMovement) -> StockMovement:
        movement.save()
        return movement

    def find_by_id(self, movement_id) -> Optional[StockMovement]:
        return (
            StockMovement.objects.select_related("product")
            .filter(pk=movement_id)
            .first()
        )

    def find_by_product_ordered_by_time_desc(
        self, product_id, *, movement_type: str | None = None
    ) -> list[StockMovement]:
        qs = StockMovement.objects.select_related("product").filter(product_id=product_id)
        if movement_type:
            qs = qs.filter(movement_type=movement_type)
        return list(qs.order_by("-created_at", "-id"))
