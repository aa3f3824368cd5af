# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()


class LoginTests(TestCase):
    """
    Login endpoint tests.

    GUARANTEES:
    - Valid credentials return a JWT pair plus username + role
    - The access token carries username + role claims
    - Bad credentials and inactive users get 401
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="admin",
            email="admin@inventario.com",
            password="admin123",
            role=User.ROLE_ADMIN,
        )

    def test_login_returns_token_and_role(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin", "password": "admin123"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "admin")
        self.assertEqual(response.data["role"], "ADMIN")
        self.assertTrue(response.data["token"])
        self.assertTrue(response.data["refresh"])

        token = AccessToken(response.data["token"])
        self.assertEqual(token["username"], "admin")
        self.assertEqual(token["role"], "ADMIN")

    def test_login_accepts_email(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin@inventario.com", "password": "admin123"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "admin")

    def test_wrong_password_is_rejected(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)
        self.assertNotIn("token", response.data)

    def test_unknown_user_is_rejected(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "ghost", "password": "whatever"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)

    def test_inactive_user_is_rejected(self):
        self.admin.is_active = False
        self.admin.save()

        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin", "password": "admin123"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)

    def test_case_variant_usernames_prefer_exact_match(self):
        User.objects.create_user(
            username="Admin",
            email="other-admin@inventario.com",
            password="other123",
        )

        response = self.client.post(
            "/api/auth/login/",
            {"username": "admin", "password": "admin123"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "admin")

        response = self.client.post(
            "/api/auth/login/",
            {"username": "Admin", "password": "other123"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "Admin")

    def test_ambiguous_case_insensitive_username_is_rejected(self):
        User.objects.create_user(
            username="Admin",
            email="other-admin@inventario.com",
            password="admin123",
        )

        response = self.client.post(
            "/api/auth/login/",
            {"username": "ADMIN", "password": "admin123"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)

    def test_unique_case_insensitive_username_still_logs_in(self):
        response = self.client.post(
            "/api/auth/login/",
            {"username": "ADMIN", "password": "admin123"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "admin")

    def test_missing_fields_is_bad_request(self):
        response = self.client.post("/api/auth/login/", {}, format="json")
        self.assertEqual(response.status_code, 400)


class MeTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="operator", password="secret123")

    def test_me_requires_authentication(self):
        response = self.client.get("/api/auth/me/")
        self.assertEqual(response.status_code, 401)

    def test_me_returns_profile(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get("/api/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "operator")
        self.assertEqual(response.data["email"], "operator@local.test")
        self.assertEqual(response.data["role"], "USER")
