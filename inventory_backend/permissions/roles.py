# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"
CAP_INVENTORY_SYNC = "inventory.sync"
CAP_STOCK_MOVE = "stock.move"           # registers ledger movements
CAP_STOCK_HISTORY = "stock.history"

ALL_CAPABILITIES = {
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_SYNC,
    CAP_STOCK_MOVE,
    CAP_STOCK_HISTORY,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_USER: {
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
        CAP_INVENTORY_SYNC,
        CAP_STOCK_HISTORY,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_STOCK_MOVE

    A view may also map actions to capabilities:
        view.required_capabilities = {"create": CAP_STOCK_MOVE, "list": CAP_STOCK_HISTORY}
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = None
        per_action = getattr(view, "required_capabilities", None)
        if per_action:
            required = per_action.get(getattr(view, "action", None))
        if not required:
            required = getattr(view, "required_capability", None)
        if not required:
            # Deny-by-default for endpoints without a declared capability
            return False

        return required in capabilities_for(user)
