# users/management/commands/ensure_admin.py

"""
PATH: users/management/commands/ensure_admin.py

Default admin bootstrap.

- Reads settings.DEFAULT_ADMIN (DEFAULT_ADMIN_USERNAME / _EMAIL / _PASSWORD env).
- Idempotent: creates the admin if missing; an existing user with that username
  is left untouched (an inactive one is reported, not reactivated).
- Logs minimal info; does NOT print the password.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create the default ADMIN user from settings if it does not exist (idempotent)."

    def handle(self, *args, **options):
        config = getattr(settings, "DEFAULT_ADMIN", {}) or {}
        username = (config.get("USERNAME") or "").strip()
        email = (config.get("EMAIL") or "").strip()
        password = (config.get("PASSWORD") or "").strip()

        if not username or not password:
            self.stdout.write(
                self.style.WARNING("DEFAULT_ADMIN_* settings not set. Skipping.")
            )
            return

        User = get_user_model()

        with transaction.atomic():
            existing = User.objects.filter(username=username).first()
            if existing is not None:
                if not existing.is_active:
                    logger.warning("Default admin account is inactive", extra={"username": username})
                    self.stdout.write(
                        self.style.WARNING(
                            f"User '{username}' exists but is inactive. "
                            "Reactivate it or choose another DEFAULT_ADMIN_USERNAME."
                        )
                    )
                    return

                logger.info("Default admin already exists", extra={"username": username})
                self.stdout.write(self.style.SUCCESS(f"Admin ensured: {username} (exists)"))
                return

            if email and User.objects.filter(email__iexact=email).exists():
                logger.warning("Default admin email already in use", extra={"username": username})
                self.stdout.write(
                    self.style.WARNING(
                        f"Email '{email}' belongs to another user. Admin not created."
                    )
                )
                return

            User.objects.create_superuser(
                username=username,
                email=email,
                password=password,
            )

        logger.info("Default admin created", extra={"username": username})
        self.stdout.write(self.style.SUCCESS(f"Admin ensured: {username} (created)"))
