from .stock_movement import StockMovementViewSet

__all__ = ["StockMovementViewSet"]
