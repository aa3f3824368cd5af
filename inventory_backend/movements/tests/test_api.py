# movements/tests/test_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from movements.models import StockMovement
from products.models import Product

User = get_user_model()


class StockMovementApiTests(TestCase):
    """
    Ledger HTTP tests.

    GUARANTEES:
    - Only ADMIN may register movements
    - Domain error codes reach the client
    - History is readable by any authenticated user
    """

    def setUp(self):
        self.admin = User.objects.create_user(
            username="admin", password="admin123", role=User.ROLE_ADMIN
        )
        self.user = User.objects.create_user(username="clerk", password="pw12345")
        self.product = Product.objects.create(
            name="Drill", category="Tools", unit_price=Decimal("89.00"), stock=100
        )

        self.admin_client = APIClient()
        self.admin_client.force_authenticate(user=self.admin)
        self.user_client = APIClient()
        self.user_client.force_authenticate(user=self.user)

    def post_movement(self, client, **overrides):
        data = {"product_id": self.product.pk, "movement_type": "INBOUND", "quantity": 10}
        data.update(overrides)
        return client.post("/api/stock-movements/", data, format="json")

    def test_admin_registers_movement(self):
        response = self.post_movement(self.admin_client)

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["stock_before"], 100)
        self.assertEqual(response.data["stock_after"], 110)
        self.assertEqual(response.data["product_name"], "Drill")
        self.assertEqual(response.data["user_id"], str(self.admin.pk))
        self.assertTrue(
            response["Location"].endswith(f"/api/stock-movements/{response.data['id']}/")
        )

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 110)

    def test_regular_user_is_forbidden(self):
        response = self.post_movement(self.user_client)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(StockMovement.objects.count(), 0)

    def test_anonymous_is_unauthorized(self):
        response = self.post_movement(APIClient())
        self.assertEqual(response.status_code, 401)

    def test_insufficient_stock(self):
        response = self.post_movement(self.admin_client, movement_type="OUTBOUND", quantity=150)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "INSUFFICIENT_STOCK")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 100)

    def test_invalid_quantity(self):
        response = self.post_movement(self.admin_client, quantity=0)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "INVALID_QUANTITY")

    def test_invalid_movement_type(self):
        response = self.post_movement(self.admin_client, movement_type="TRANSFER")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "INVALID_MOVEMENT_TYPE")

    def test_missing_fields(self):
        response = self.admin_client.post("/api/stock-movements/", {}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("product_id", response.data)

    def test_unknown_product(self):
        response = self.post_movement(self.admin_client, product_id=999999)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["code"], "NOT_FOUND")

    def test_history_newest_first(self):
        self.post_movement(self.admin_client, quantity=5)
        self.post_movement(self.admin_client, movement_type="OUTBOUND", quantity=3)

        response = self.user_client.get("/api/stock-movements/", {"product_id": self.product.pk})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([m["movement_type"] for m in response.data], ["OUTBOUND", "INBOUND"])
        self.assertEqual(response.data[0]["stock_after"], 102)

    def test_history_filtered_by_type(self):
        self.post_movement(self.admin_client, quantity=5)
        self.post_movement(self.admin_client, movement_type="OUTBOUND", quantity=3)

        response = self.user_client.get(
            "/api/stock-movements/",
            {"product_id": self.product.pk, "movement_type": "INBOUND"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

    def test_history_requires_product_id(self):
        response = self.user_client.get("/api/stock-movements/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "INVALID_REQUEST")

    def test_history_rejects_non_integer_product_id(self):
        self.post_movement(self.admin_client)

        for raw in (f"{self.product.pk}.7", "-1", "0", "abc"):
            response = self.user_client.get("/api/stock-movements/", {"product_id": raw})
            self.assertEqual(response.status_code, 400, raw)
            self.assertEqual(response.data["code"], "INVALID_REQUEST", raw)

    def test_history_rejects_unknown_movement_type(self):
        response = self.user_client.get(
            "/api/stock-movements/",
            {"product_id": self.product.pk, "movement_type": "inbound"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["code"], "INVALID_REQUEST")

    def test_history_unknown_product(self):
        response = self.user_client.get("/api/stock-movements/", {"product_id": 999999})
        self.assertEqual(response.status_code, 404)

    def test_retrieve_movement(self):
        created = self.post_movement(self.admin_client).data

        response = self.user_client.get(f"/api/stock-movements/{created['id']}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["quantity"], 10)
