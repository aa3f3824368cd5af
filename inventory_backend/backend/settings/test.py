# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

Used by both `python manage.py test --settings=backend.settings.test`
and pytest (see [tool.pytest.ini_options] in pyproject.toml).

- Fast password hashing
- In-memory SQLite unless DATABASE_URL says otherwise
- Throttling off so API tests are not rate limited
- External catalog URL points nowhere (tests mock the client)
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK, env

DEBUG = False
TESTING = True

SECRET_KEY = "test-secret-key-not-for-production-use-0123456789"

DATABASES = {
    "default": env.db("DATABASE_URL", default="sqlite://:memory:"),
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
}

FAKESTORE = {
    "API_URL": "http://fakestore.invalid/products",
    "TIMEOUT_SECONDS": 1,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "WARNING"},
}
