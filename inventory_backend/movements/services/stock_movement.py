# movements/services/stock_movement.py

"""
======================================================
PATH: movements/services/stock_movement.py
======================================================
STOCK MOVEMENT SERVICE (ledger core)

Flow of register_movement():
1. Validate the request (no storage access on failure).
2. Read the product (NotFoundError if missing).
3. Compute the new stock:
     INBOUND:  current + quantity must stay <= MAX_STOCK_VALUE
     OUTBOUND: quantity must not exceed current
4. Append the StockMovement row.
5. Save the product through ProductStore (version compare-and-swap).

Steps 4 + 5 share ONE transaction: a conflict or storage failure in step 5
rolls back the movement row too.

Rules:
- ConcurrencyConflictError is propagated, never retried here.
- Every call appends a new movement (no idempotency key).
- DatabaseError is re-raised as StorageError after rollback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from common.exceptions import (
    InvalidArgumentError,
    InventoryServiceError,
    NotFoundError,
    StorageError,
)
from common.sanitize import sanitize_for_log
from movements.models import MAX_MOVEMENT_QUANTITY, StockMovement
from movements.services.movement_store import MovementStore
from products.services.product_store import ProductStore

logger = logging.getLogger(__name__)

MAX_INT = 2**31 - 1
MAX_QUANTITY = MAX_MOVEMENT_QUANTITY
MAX_STOCK_VALUE = MAX_INT - MAX_QUANTITY

INBOUND = StockMovement.MovementType.INBOUND
OUTBOUND = StockMovement.MovementType.OUTBOUND


@dataclass(frozen=True)
class MovementRequest:
    product_id: Any = None
    movement_type: Any = None
    quantity: Any = None


@dataclass(frozen=True)
class MovementRecord:
    id: int
    product_id: int
    product_name: str
    movement_type: str
    quantity: int
    created_at: datetime
    user_id: Optional[Any]
    stock_before: int
    stock_after: int

    @classmethod
    def from_movement(cls, movement: StockMovement, *, product_name: str) -> "MovementRecord":
        return cls(
            id=movement.pk,
            product_id=movement.product_id,
            product_name=product_name,
            movement_type=str(movement.movement_type),
            quantity=movement.quantity,
            created_at=movement.created_at,
            user_id=movement.performed_by_id,
            stock_before=movement.stock_before,
            stock_after=movement.stock_after,
        )


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_movement_type(value) -> StockMovement.MovementType:
    if isinstance(value, StockMovement.MovementType):
        return value
    if isinstance(value, str):
        try:
            return StockMovement.MovementType(value.strip())
        except ValueError:
            pass
    raise InvalidArgumentError(
        f"Invalid movement type: {sanitize_for_log(value)}. Expected INBOUND or OUTBOUND",
        code="INVALID_MOVEMENT_TYPE",
    )


def validate_request(request: MovementRequest):
    """Return (product_id, movement_type, quantity) or raise InvalidArgumentError."""
    if request is None:
        raise InvalidArgumentError("Movement request is required")

    if request.product_id is None:
        raise InvalidArgumentError("product_id is required")
    if request.movement_type is None or request.movement_type == "":
        raise InvalidArgumentError("movement_type is required")
    if request.quantity is None:
        raise InvalidArgumentError("quantity is required")

    if not _is_int(request.product_id):
        raise InvalidArgumentError("product_id must be an integer")
    if request.product_id <= 0:
        raise InvalidArgumentError("product_id must be positive")

    movement_type = _parse_movement_type(request.movement_type)

    if not _is_int(request.quantity):
        raise InvalidArgumentError("quantity must be an integer", code="INVALID_QUANTITY")
    if request.quantity <= 0:
        raise InvalidArgumentError("quantity must be positive", code="INVALID_QUANTITY")
    if request.quantity > MAX_QUANTITY:
        raise InvalidArgumentError(
            f"quantity exceeds the allowed limit of {MAX_QUANTITY:,}",
            code="INVALID_QUANTITY",
        )

    return request.product_id, movement_type, request.quantity


def compute_new_stock(current: int, quantity: int, movement_type) -> int:
    # Python ints do not overflow; the ceiling keeps the DB integer column safe.
    if movement_type == INBOUND:
        if current + quantity > MAX_STOCK_VALUE:
            raise InvalidArgumentError(
                f"Operation would overflow. Current stock: {current}, quantity to add: {quantity}",
                code="STOCK_OVERFLOW",
            )
        new_stock = current + quantity
    elif movement_type == OUTBOUND:
        if current < quantity:
            raise InvalidArgumentError(
                f"Insufficient stock. Available: {current}, requested: {quantity}",
                code="INSUFFICIENT_STOCK",
            )
        new_stock = current - quantity
    else:
        raise InvalidArgumentError(
            f"Invalid movement type: {sanitize_for_log(movement_type)}",
            code="INVALID_MOVEMENT_TYPE",
        )

    if new_stock < 0:
        raise InvalidArgumentError("Stock cannot be negative", code="NEGATIVE_STOCK")

    return new_stock


class StockMovementService:
    def __init__(
        self,
        *,
        product_store: ProductStore | None = None,
        movement_store: MovementStore | None = None,
    ):
        self.product_store = product_store or ProductStore()
        self.movement_store = movement_store or MovementStore()

    def register_movement(self, request: MovementRequest, *, user=None) -> MovementRecord:
        try:
            product_id, movement_type, quantity = validate_request(request)
        except InvalidArgumentError as exc:
            logger.warning(
                "Stock movement rejected",
                extra={"code": exc.code, "error": sanitize_for_log(exc.message)},
            )
            raise

        logger.info(
            "Registering stock movement",
            extra={
                "product_id": sanitize_for_log(product_id),
                "movement_type": sanitize_for_log(movement_type),
                "quantity": sanitize_for_log(quantity),
            },
        )

        acting_user = user if getattr(user, "is_authenticated", False) else None

        try:
            with transaction.atomic():
                product = self.product_store.find_by_id(product_id)
                if product is None:
                    raise NotFoundError("Product", "id", product_id)

                stock_before = product.stock
                stock_after = compute_new_stock(stock_before, quantity, movement_type)

                movement = StockMovement(
                    product=product,
                    movement_type=movement_type,
                    quantity=quantity,
                    performed_by=acting_user,
                    stock_before=stock_before,
                    stock_after=stock_after,
                )
                self.movement_store.save(movement)

                product.stock = stock_after
                self.product_store.save(product, fields=("stock",))
        except InventoryServiceError as exc:
            logger.warning(
                "Stock movement rejected",
                extra={
                    "code": exc.code,
                    "product_id": sanitize_for_log(product_id),
                    "error": sanitize_for_log(exc.message),
                },
            )
            raise
        except ValidationError as exc:
            raise InvalidArgumentError("; ".join(exc.messages)) from exc
        except DatabaseError as exc:
            logger.exception(
                "Storage failure while registering stock movement",
                extra={"product_id": sanitize_for_log(product_id)},
            )
            raise StorageError(
                "Could not persist the stock movement; nothing was committed"
            ) from exc

        logger.info(
            "Stock movement registered",
            extra={
                "product_id": product.pk,
                "movement_id": movement.pk,
                "stock_before": stock_before,
                "stock_after": stock_after,
            },
        )

        return MovementRecord.from_movement(movement, product_name=product.name)

    def list_movements(self, product_id, *, movement_type: str | None = None) -> list[MovementRecord]:
        product = self.product_store.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", "id", product_id)

        movements = self.movement_store.find_by_product_ordered_by_time_desc(
            product_id, movement_type=movement_type
        )
        return [MovementRecord.from_movement(m, product_name=product.name) for m in movements]

    def get_movement(self, movement_id) -> MovementRecord:
        movement = self.movement_store.find_by_id(movement_id)
        if movement is None:
            raise NotFoundError("StockMovement", "id", movement_id)
        return MovementRecord.from_movement(movement, product_name=movement.product.name)
