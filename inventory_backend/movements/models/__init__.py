from .stock_movement import MAX_MOVEMENT_QUANTITY, StockMovement

__all__ = ["StockMovement", "MAX_MOVEMENT_QUANTITY"]
