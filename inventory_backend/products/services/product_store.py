# products/services/product_store.py

"""
======================================================
PATH: products/services/product_store.py
======================================================
PRODUCT STORE (optimistic concurrency)

Rules:
- find_by_id() is a plain read: no row locks are taken.
- save() on a new product is a normal INSERT (version starts at 0).
- save() on an existing product is a compare-and-swap:

      UPDATE product SET ..., version = version + 1
      WHERE id = <id> AND version = <version read>

  Zero rows updated means someone else committed first ->
  ConcurrencyConflictError. There is no retry here; callers decide.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.db.models import F

from common.exceptions import ConcurrencyConflictError
from products.models import Product

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "category", "supplier", "unit_price", "stock")


class ProductStore:
    def find_by_id(self, product_id) -> Optional[Product]:
        return Product.objects.filter(pk=product_id).first()

    def exists_by_id(self, product_id) -> bool:
        return Product.objects.filter(pk=product_id).exists()

    def save(self, product: Product, *, fields: Iterable[str] | None = None) -> Product:
        if product._state.adding or product.pk is None:
            product.version = 0
            product.save()
            return product

        field_names = tuple(fields) if fields else UPDATABLE_FIELDS
        values = {name: getattr(product, name) for name in field_names}
        expected_version = product.version

        updated = Product.objects.filter(
            pk=product.pk,
            version=expected_version,
        ).update(version=F("version") + 1, **values)

        if updated == 0:
            logger.warning(
                "Optimistic version check failed",
                extra={"product_id": product.pk, "expected_version": expected_version},
            )
            raise ConcurrencyConflictError(
                f"Product {product.pk} was modified concurrently "
                f"(expected version {expected_version}). Reload and try again."
            )

        product.version = expected_version + 1
        return product
