# products/tests/test_products.py

from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase

from common.exceptions import ConcurrencyConflictError
from products.models import Product
from products.services.product_store import ProductStore


class ProductModelTests(TestCase):
    """
    Product model tests.

    GUARANTEES:
    - Products can be created safely
    - Name uniqueness is enforced
    - Stock can never go negative (DB constraint)
    """

    def test_product_creation(self):
        product = Product.objects.create(
            name="Laptop",
            category="Electronics",
            unit_price=Decimal("999.99"),
            stock=5,
        )

        self.assertEqual(product.name, "Laptop")
        self.assertEqual(product.version, 0)
        self.assertIsNotNone(product.created_at)

    def test_name_must_be_unique(self):
        Product.objects.create(name="Mouse", category="Electronics", unit_price=Decimal("10.00"))

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(
                    name="Mouse", category="Accessories", unit_price=Decimal("12.00")
                )

    def test_negative_stock_is_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.create(
                    name="Broken", category="Misc", unit_price=Decimal("1.00"), stock=-1
                )


class ProductStoreTests(TestCase):
    """
    Optimistic concurrency on product writes.

    GUARANTEES:
    - Every successful update bumps version by one
    - A stale version never overwrites newer data
    """

    def setUp(self):
        self.store = ProductStore()
        self.product = self.store.save(
            Product(name="Keyboard", category="Electronics", unit_price=Decimal("50.00"), stock=10)
        )

    def test_insert_starts_at_version_zero(self):
        self.assertIsNotNone(self.product.pk)
        self.assertEqual(self.product.version, 0)

    def test_update_increments_version(self):
        self.product.stock = 20
        self.store.save(self.product)

        refreshed = Product.objects.get(pk=self.product.pk)
        self.assertEqual(refreshed.stock, 20)
        self.assertEqual(refreshed.version, 1)
        self.assertEqual(self.product.version, 1)

    def test_stale_version_raises_conflict(self):
        stale = Product.objects.get(pk=self.product.pk)
        fresh = Product.objects.get(pk=self.product.pk)

        fresh.stock = 11
        self.store.save(fresh)

        stale.stock = 99
        with self.assertRaises(ConcurrencyConflictError) as ctx:
            self.store.save(stale)

        self.assertEqual(ctx.exception.code, "CONCURRENCY_CONFLICT")
        refreshed = Product.objects.get(pk=self.product.pk)
        self.assertEqual(refreshed.stock, 11)
        self.assertEqual(refreshed.version, 1)

    def test_find_by_id_returns_none_when_missing(self):
        self.assertIsNone(self.store.find_by_id(999999))
