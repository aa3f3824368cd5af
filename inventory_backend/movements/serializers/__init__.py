from .stock_movement import MovementRecordSerializer, StockMovementRequestSerializer

__all__ = ["MovementRecordSerializer", "StockMovementRequestSerializer"]
