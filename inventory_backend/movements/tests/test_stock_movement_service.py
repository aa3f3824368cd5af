# movements/tests/test_stock_movement_service.py

from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from common.exceptions import (
    ConcurrencyConflictError,
    InvalidArgumentError,
    NotFoundError,
    StorageError,
)
from movements.models import StockMovement
from movements.services.movement_store import MovementStore
from movements.services.stock_movement import (
    MAX_INT,
    MAX_STOCK_VALUE,
    MovementRequest,
    StockMovementService,
    compute_new_stock,
)
from products.models import Product
from products.services.product_store import ProductStore

User = get_user_model()

INBOUND = StockMovement.MovementType.INBOUND
OUTBOUND = StockMovement.MovementType.OUTBOUND


class StockMovementServiceTests(TestCase):
    """
    Ledger core tests.

    GUARANTEES:
    - INBOUND adds, OUTBOUND subtracts, both append exactly one movement
    - Rejected requests leave stock AND history untouched
    - Concurrent modification is reported, never retried, and leaves no orphan row
    """

    def setUp(self):
        self.service = StockMovementService()
        self.admin = User.objects.create_user(
            username="admin", password="admin123", role=User.ROLE_ADMIN
        )
        self.product = Product.objects.create(
            name="Widget",
            category="Tools",
            unit_price=Decimal("5.00"),
            stock=100,
        )

    def register(self, movement_type, quantity, product_id=None, user=None):
        return self.service.register_movement(
            MovementRequest(
                product_id=product_id or self.product.pk,
                movement_type=movement_type,
                quantity=quantity,
            ),
            user=user,
        )

    def assert_untouched(self, stock=100):
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, stock)
        self.assertEqual(StockMovement.objects.count(), 0)

    # ---------------- concrete scenarios ----------------
    def test_inbound_adds_stock(self):
        record = self.register(INBOUND, 10, user=self.admin)

        self.assertEqual(record.stock_before, 100)
        self.assertEqual(record.stock_after, 110)
        self.assertEqual(record.product_name, "Widget")
        self.assertEqual(record.movement_type, "INBOUND")
        self.assertEqual(record.user_id, self.admin.pk)
        self.assertIsNotNone(record.created_at)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 110)
        self.assertEqual(self.product.version, 1)

        movement = StockMovement.objects.get()
        self.assertEqual(movement.pk, record.id)
        self.assertEqual(movement.stock_after, 110)
        self.assertEqual(movement.performed_by, self.admin)

    def test_outbound_to_zero_is_allowed(self):
        record = self.register(OUTBOUND, 100)

        self.assertEqual(record.stock_after, 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)
        self.assertEqual(StockMovement.objects.count(), 1)

    def test_outbound_more_than_stock_is_rejected(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            self.register(OUTBOUND, 150)

        self.assertEqual(ctx.exception.code, "INSUFFICIENT_STOCK")
        self.assert_untouched()

    def test_inbound_overflow_is_rejected(self):
        Product.objects.filter(pk=self.product.pk).update(stock=MAX_INT - 1)

        with self.assertRaises(InvalidArgumentError) as ctx:
            self.register(INBOUND, 1)

        self.assertEqual(ctx.exception.code, "STOCK_OVERFLOW")
        self.assert_untouched(stock=MAX_INT - 1)

    def test_stale_read_raises_conflict_without_orphan_movement(self):
        stale = Product.objects.get(pk=self.product.pk)

        # another writer commits first
        fresh = Product.objects.get(pk=self.product.pk)
        fresh.stock = 90
        ProductStore().save(fresh)

        with mock.patch.object(ProductStore, "find_by_id", return_value=stale):
            with self.assertRaises(ConcurrencyConflictError) as ctx:
                self.register(INBOUND, 5)

        self.assertEqual(ctx.exception.code, "CONCURRENCY_CONFLICT")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 90)
        self.assertEqual(self.product.version, 1)
        self.assertEqual(StockMovement.objects.count(), 0)

    # ---------------- boundaries ----------------
    def test_inbound_up_to_ceiling_is_allowed(self):
        Product.objects.filter(pk=self.product.pk).update(stock=MAX_STOCK_VALUE - 10)

        record = self.register(INBOUND, 10)

        self.assertEqual(record.stock_after, MAX_STOCK_VALUE)

    def test_quantity_limits(self):
        record = self.register(INBOUND, 1_000_000)
        self.assertEqual(record.stock_after, 1_000_100)

        for quantity in (0, -1, 1_000_001):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidArgumentError) as ctx:
                    self.register(INBOUND, quantity)
                self.assertEqual(ctx.exception.code, "INVALID_QUANTITY")

        self.assertEqual(StockMovement.objects.count(), 1)

    def test_non_integer_quantity_is_rejected(self):
        for quantity in (1.5, "10", True):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidArgumentError):
                    self.register(INBOUND, quantity)
        self.assert_untouched()

    def test_missing_fields_are_rejected_without_storage_access(self):
        requests = [
            MovementRequest(product_id=None, movement_type=INBOUND, quantity=1),
            MovementRequest(product_id=self.product.pk, movement_type=None, quantity=1),
            MovementRequest(product_id=self.product.pk, movement_type=INBOUND, quantity=None),
            MovementRequest(product_id=0, movement_type=INBOUND, quantity=1),
            MovementRequest(product_id="1", movement_type=INBOUND, quantity=1),
        ]

        with mock.patch.object(ProductStore, "find_by_id") as find_by_id:
            for request in requests:
                with self.subTest(request=request):
                    with self.assertRaises(InvalidArgumentError) as ctx:
                        self.service.register_movement(request)
                    self.assertEqual(ctx.exception.code, "INVALID_REQUEST")

            find_by_id.assert_not_called()

        self.assert_untouched()

    def test_none_request_is_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            self.service.register_movement(None)

    def test_unknown_movement_type_is_rejected(self):
        for movement_type in ("SIDEWAYS", "inbound", 7):
            with self.subTest(movement_type=movement_type):
                with self.assertRaises(InvalidArgumentError) as ctx:
                    self.register(movement_type, 1)
                self.assertEqual(ctx.exception.code, "INVALID_MOVEMENT_TYPE")
        self.assert_untouched()

    def test_plain_string_movement_type_is_accepted(self):
        record = self.register("OUTBOUND", 1)
        self.assertEqual(record.stock_after, 99)

    def test_missing_product(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.register(INBOUND, 1, product_id=987654)
        self.assertEqual(ctx.exception.code, "NOT_FOUND")
        self.assertEqual(StockMovement.objects.count(), 0)

    def test_anonymous_user_is_not_recorded(self):
        record = self.register(INBOUND, 1, user=mock.Mock(is_authenticated=False))
        self.assertIsNone(record.user_id)

    def test_every_call_appends_a_movement(self):
        self.register(INBOUND, 5)
        self.register(INBOUND, 5)
        self.register(OUTBOUND, 3)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 107)
        self.assertEqual(StockMovement.objects.count(), 3)

    def test_replaying_history_reproduces_stock(self):
        self.register(INBOUND, 20)
        self.register(OUTBOUND, 70)
        self.register(INBOUND, 1)

        history = self.service.list_movements(self.product.pk)
        replayed = 100
        for record in reversed(history):
            self.assertEqual(record.stock_before, replayed)
            delta = record.quantity if record.movement_type == "INBOUND" else -record.quantity
            replayed += delta
            self.assertEqual(record.stock_after, replayed)

        self.product.refresh_from_db()
        self.assertEqual(replayed, self.product.stock)

    # ---------------- storage failures ----------------
    def test_storage_failure_after_movement_rolls_back(self):
        with mock.patch.object(ProductStore, "save", side_effect=DatabaseError("disk full")):
            with self.assertRaises(StorageError) as ctx:
                self.register(INBOUND, 10)

        self.assertEqual(ctx.exception.code, "STORAGE_ERROR")
        self.assert_untouched()

    def test_storage_failure_on_movement_insert(self):
        with mock.patch.object(MovementStore, "save", side_effect=DatabaseError("locked")):
            with self.assertRaises(StorageError):
                self.register(OUTBOUND, 10)

        self.assert_untouched()


class HistoryTests(TestCase):
    def setUp(self):
        self.service = StockMovementService()
        self.product = Product.objects.create(
            name="Bolt", category="Hardware", unit_price=Decimal("0.10"), stock=0
        )

    def test_history_is_newest_first(self):
        first = self.service.register_movement(MovementRequest(self.product.pk, INBOUND, 10))
        second = self.service.register_movement(MovementRequest(self.product.pk, OUTBOUND, 4))

        history = self.service.list_movements(self.product.pk)

        self.assertEqual([r.id for r in history], [second.id, first.id])
        self.assertTrue(all(r.product_name == "Bolt" for r in history))

    def test_history_filtered_by_type(self):
        self.service.register_movement(MovementRequest(self.product.pk, INBOUND, 10))
        self.service.register_movement(MovementRequest(self.product.pk, OUTBOUND, 4))

        history = self.service.list_movements(self.product.pk, movement_type="OUTBOUND")

        self.assertEqual(len(history), 1)
        self.assertEqual(history[0].quantity, 4)

    def test_history_of_missing_product(self):
        with self.assertRaises(NotFoundError):
            self.service.list_movements(123456)

    def test_get_movement(self):
        record = self.service.register_movement(MovementRequest(self.product.pk, INBOUND, 2))
        self.assertEqual(self.service.get_movement(record.id), record)

        with self.assertRaises(NotFoundError):
            self.service.get_movement(999999)


class ComputeNewStockTests(TestCase):
    def test_arithmetic(self):
        self.assertEqual(compute_new_stock(100, 10, INBOUND), 110)
        self.assertEqual(compute_new_stock(100, 100, OUTBOUND), 0)

    def test_unknown_type(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            compute_new_stock(1, 1, "SIDEWAYS")
        self.assertEqual(ctx.exception.code, "INVALID_MOVEMENT_TYPE")

    def test_negative_result_guard(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            compute_new_stock(-5, 1, INBOUND)
        self.assertEqual(ctx.exception.code, "NEGATIVE_STOCK")
