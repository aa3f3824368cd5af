"""
PATH: users/models/user.py

CUSTOM USER MODEL

Auth rules:
- Login identity is the username (email login is also accepted by the backend).
- Roles are coarse: ADMIN may register stock movements, USER may browse and
  edit the catalog.
- The user id is what the stock ledger records as the acting user.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from permissions.roles import ROLE_ADMIN, ROLE_USER


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, username=None, password=None, **extra_fields):
        """
        Supported call shapes:
        - create_user(username="operator", password="x")
        - create_user(username="operator", email="op@example.com", password="x")

        If email is missing it becomes <username>@local.test.
        """
        username = (username or "").strip()
        if not username:
            raise ValueError("A username is required")

        email = (extra_fields.pop("email", "") or "").strip()
        if not email:
            email = f"{username.lower()}@local.test"

        extra_fields.setdefault("is_active", True)

        user = self.model(
            username=username,
            email=self.normalize_email(email),
            **extra_fields,
        )

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(username=username, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = ROLE_ADMIN
    ROLE_USER = ROLE_USER

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_USER, "User"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(max_length=100, unique=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["email"]

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        self.username = (self.username or "").strip()
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()

        if not self.username:
            raise ValidationError("User must have a username")

    @property
    def is_admin_role(self) -> bool:
        return self.role == self.ROLE_ADMIN

    def __str__(self):
        return f"{self.username} ({self.role})"
