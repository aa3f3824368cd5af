"""
PATH: users/auth_backends.py

AUTH BACKEND: Username OR Email login

Rules:
- Identifier containing "@" is looked up by email, otherwise by username.
- Exact match wins; a case-insensitive match is used only when it is unambiguous.
- Inactive users never authenticate.
- If a caller supplies both username= and email= explicitly, authentication fails.

This is used by django.contrib.auth.authenticate() (admin + LoginView).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend

User = get_user_model()


class UsernameOrEmailBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        email_kw = (kwargs.get("email") or "").strip()

        if email_kw and (username or "").strip():
            return None

        identifier = (username or email_kw or "").strip()
        if not identifier or password is None:
            return None

        field = "email" if "@" in identifier else "username"
        user = self._find_user(field, identifier)
        if user is None:
            # Run the hasher anyway so timing does not reveal unknown usernames.
            User().set_password(password)
            return None

        if not user.is_active:
            return None

        if user.check_password(password):
            return user

        return None

    def _find_user(self, field: str, identifier: str):
        """
        Exact match first, then case-insensitive.

        Uniqueness is case-sensitive, so a case-insensitive lookup can match
        several accounts; that is treated as no match.
        """
        try:
            return User.objects.get(**{field: identifier})
        except User.DoesNotExist:
            pass

        try:
            return User.objects.get(**{f"{field}__iexact": identifier})
        except (User.DoesNotExist, User.MultipleObjectsReturned):
            return None

    def get_user(self, user_id):
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return None
        return user if user.is_active else None
