# products/services/catalog_sync.py

"""
======================================================
PATH: products/services/catalog_sync.py
======================================================
EXTERNAL CATALOG SYNC (FakeStore)

Rules:
- Only NEW names are inserted; existing products are never touched.
- Items without a usable title are skipped.
- Titles + categories are trimmed and HTML-escaped before storage.
- Blank category -> "Sin categoría"; missing/invalid/negative price -> 0.
- New products: supplier="FakeStore API", stock=0, version=0.
- Inserts run in chunks of MAX_SYNC_BATCH_SIZE inside ONE transaction.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from django.db import DatabaseError, transaction
from django.utils.html import escape

from common.exceptions import StorageError
from products.models import Product
from products.services.fakestore import FakeStoreClient, FakeStoreProduct

logger = logging.getLogger(__name__)

MAX_SYNC_BATCH_SIZE = 1000
DEFAULT_CATEGORY = "Sin categoría"
FAKESTORE_SUPPLIER = "FakeStore API"

NAME_MAX_LENGTH = Product._meta.get_field("name").max_length
CATEGORY_MAX_LENGTH = Product._meta.get_field("category").max_length
MAX_UNIT_PRICE = Decimal("9999999999.99")


def sanitize_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return str(escape(text))


def _price_of(item: FakeStoreProduct, name: str) -> Decimal:
    try:
        price = Decimal(str(item.price))
    except (InvalidOperation, ValueError, TypeError):
        price = None

    if price is None or not price.is_finite() or price < 0 or price > MAX_UNIT_PRICE:
        logger.debug("Invalid price, using 0", extra={"product_name": name})
        return Decimal("0.00")
    return price.quantize(Decimal("0.01"))


def _category_of(item: FakeStoreProduct) -> str:
    category = sanitize_text(item.category)
    if not category:
        return DEFAULT_CATEGORY
    return category[:CATEGORY_MAX_LENGTH]


def build_new_products(items: Iterable[FakeStoreProduct], existing_names: set[str]) -> list[Product]:
    seen = set(existing_names)
    new_products: list[Product] = []

    for item in items:
        name = sanitize_text(getattr(item, "title", None))
        if not name:
            logger.debug("Skipping item without title", extra={"external_id": getattr(item, "id", None)})
            continue
        if len(name) > NAME_MAX_LENGTH:
            logger.debug("Skipping item with overlong title", extra={"external_id": item.id})
            continue
        if name in seen:
            logger.debug("Skipping existing product", extra={"product_name": name})
            continue

        seen.add(name)
        new_products.append(
            Product(
                name=name,
                category=_category_of(item),
                supplier=FAKESTORE_SUPPLIER,
                unit_price=_price_of(item, name),
                stock=0,
                version=0,
            )
        )

    return new_products


def _insert_in_chunks(products: list[Product]) -> int:
    total = 0
    for start in range(0, len(products), MAX_SYNC_BATCH_SIZE):
        chunk = products[start : start + MAX_SYNC_BATCH_SIZE]
        Product.objects.bulk_create(chunk)
        total += len(chunk)
        logger.debug(
            "Sync chunk inserted",
            extra={"chunk": start // MAX_SYNC_BATCH_SIZE + 1, "inserted": len(chunk)},
        )
    return total


def sync_from_fakestore(*, client: FakeStoreClient | None = None) -> int:
    """
    Import products from FakeStore that are not yet in the catalog.

    Returns the number of inserted products (0 when the upstream is down
    or everything already exists).
    """
    client = client or FakeStoreClient()
    logger.info("Starting FakeStore catalog sync")

    items = client.get_all_products()
    if not items:
        logger.warning("No products fetched for sync")
        return 0

    candidate_names = {
        name for name in (sanitize_text(getattr(i, "title", None)) for i in items) if name
    }
    if not candidate_names:
        logger.warning("No valid products left after filtering")
        return 0

    try:
        with transaction.atomic():
            existing = set(
                Product.objects.filter(name__in=candidate_names).values_list("name", flat=True)
            )
            new_products = build_new_products(items, existing)
            if not new_products:
                logger.info("Sync found no new products")
                return 0
            inserted = _insert_in_chunks(new_products)
    except DatabaseError as exc:
        logger.exception("Catalog sync failed")
        raise StorageError("Catalog sync failed; nothing was imported") from exc

    logger.info("Catalog sync completed", extra={"inserted": inserted})
    return inserted
