# products/services/catalog.py

"""
======================================================
PATH: products/services/catalog.py
======================================================
CATALOG SERVICES

Purpose:
- Paged product listing (search / category filter / whitelisted sort).
- Product CRUD with duplicate-name protection.

Rules:
- Names are unique (trimmed). Duplicates raise DuplicateResourceError.
- Updates go through ProductStore.save() (version compare-and-swap).
- Deleting a product that has ledger history is refused by the database
  (PROTECT) and surfaces as ProtectedError.
- Catalog edits may set stock directly; the ledger is the audited path.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from common.exceptions import DuplicateResourceError, InvalidArgumentError, NotFoundError
from common.sanitize import sanitize_for_log
from products.models import Product
from products.services.product_store import ProductStore

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "created_at"
ALLOWED_SORT_FIELDS = frozenset(
    {"id", "name", "category", "supplier", "unit_price", "stock", DEFAULT_SORT_FIELD}
)
DEFAULT_SORT_DIR = "desc"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class Page:
    content: list = field(default_factory=list)
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    total_elements: int = 0
    total_pages: int = 0
    first: bool = True
    last: bool = True


def _normalize_text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _clean_or_reject(product: Product) -> None:
    try:
        product.full_clean(validate_unique=False)
    except ValidationError as exc:
        raise InvalidArgumentError("; ".join(exc.messages)) from exc


def _raise_duplicate(name: str):
    raise DuplicateResourceError(f"A product named '{name}' already exists")


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------
def list_products(
    *,
    search=None,
    category=None,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort_by: str = DEFAULT_SORT_FIELD,
    sort_dir: str = DEFAULT_SORT_DIR,
) -> Page:
    search = _normalize_text(search)
    category = _normalize_text(category)
    page = max(0, int(page))
    size = max(1, min(int(size), MAX_PAGE_SIZE))
    sort_by = sort_by if sort_by in ALLOWED_SORT_FIELDS else DEFAULT_SORT_FIELD
    descending = (sort_dir or "").strip().lower() == DEFAULT_SORT_DIR

    logger.info(
        "Listing products",
        extra={
            "search": sanitize_for_log(search),
            "category": sanitize_for_log(category),
            "page": page,
            "size": size,
        },
    )

    qs = Product.objects.all()
    if search:
        qs = qs.filter(name__icontains=search)
    if category:
        qs = qs.filter(category__icontains=category)

    prefix = "-" if descending else ""
    ordering = [f"{prefix}{sort_by}"]
    if sort_by != "id":
        ordering.append(f"{prefix}id")
    qs = qs.order_by(*ordering)

    total_elements = qs.count()
    total_pages = math.ceil(total_elements / size) if total_elements else 0
    offset = page * size
    content = list(qs[offset : offset + size])

    return Page(
        content=content,
        page=page,
        size=size,
        total_elements=total_elements,
        total_pages=total_pages,
        first=page == 0,
        last=page + 1 >= total_pages,
    )


def get_product(product_id) -> Product:
    product = ProductStore().find_by_id(product_id)
    if product is None:
        raise NotFoundError("Product", "id", product_id)
    return product


# ---------------------------------------------------------
# Commands
# ---------------------------------------------------------
@transaction.atomic
def create_product(*, name, category, unit_price, stock=0, supplier=None) -> Product:
    name = _normalize_text(name) or ""
    logger.info("Creating product", extra={"product_name": sanitize_for_log(name)})

    if name and Product.objects.filter(name=name).exists():
        _raise_duplicate(name)

    product = Product(
        name=name,
        category=_normalize_text(category) or "",
        supplier=_normalize_text(supplier),
        unit_price=Decimal(str(unit_price)) if unit_price is not None else None,
        stock=stock,
    )
    _clean_or_reject(product)

    try:
        with transaction.atomic():
            ProductStore().save(product)
    except IntegrityError as exc:
        raise DuplicateResourceError(f"A product named '{name}' already exists") from exc

    logger.info("Product created", extra={"product_id": product.pk})
    return product


@transaction.atomic
def update_product(
    product_id, *, name, category, unit_price, stock, supplier=None, version=None
) -> Product:
    """
    Full replacement of the editable fields.

    If `version` is supplied it must match the stored version (client-side
    optimistic check); otherwise the version read here is used.
    """
    logger.info("Updating product", extra={"product_id": product_id})

    store = ProductStore()
    product = store.find_by_id(product_id)
    if product is None:
        raise NotFoundError("Product", "id", product_id)

    new_name = _normalize_text(name) or ""
    if (
        new_name
        and new_name != product.name
        and Product.objects.filter(name=new_name).exclude(pk=product.pk).exists()
    ):
        _raise_duplicate(new_name)

    if version is not None:
        product.version = int(version)

    product.name = new_name
    product.category = _normalize_text(category) or ""
    product.supplier = _normalize_text(supplier)
    product.unit_price = Decimal(str(unit_price)) if unit_price is not None else None
    product.stock = stock
    _clean_or_reject(product)

    try:
        with transaction.atomic():
            store.save(product)
    except IntegrityError as exc:
        raise DuplicateResourceError(
            f"A product named '{new_name}' already exists"
        ) from exc

    logger.info(
        "Product updated",
        extra={"product_id": product.pk, "version": product.version},
    )
    return product


@transaction.atomic
def delete_product(product_id) -> None:
    logger.info("Deleting product", extra={"product_id": product_id})

    if not ProductStore().exists_by_id(product_id):
        raise NotFoundError("Product", "id", product_id)

    Product.objects.filter(pk=product_id).delete()
    logger.info("Product deleted", extra={"product_id": product_id})
