# backend/settings/__init__.py
"""
Settings modules for the inventory backend.

Nothing is imported here; DJANGO_SETTINGS_MODULE picks one of:
- backend.settings.dev   (local, SQLite by default)
- backend.settings.test  (manage.py test and pytest)
- backend.settings.prod  (Postgres, hardened; fails closed on missing env)
"""
