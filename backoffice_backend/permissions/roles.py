# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# Two roles only: admins run the back office, users do data entry.
ROLE_ADMIN = "admin"
ROLE_USER = "user"

ROLES = {
    ROLE_ADMIN,
    ROLE_USER,
}

ROLE_CHOICES = [
    (ROLE_USER, "User"),
    (ROLE_ADMIN, "Admin"),
]


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_ORDERS_WRITE = "orders.write"
CAP_CLIENTS_WRITE = "clients.write"
CAP_CATALOG_EDIT = "catalog.edit"
CAP_REPORTS_VIEW = "reports.view"
CAP_USERS_MANAGE = "users.manage"

ALL_CAPABILITIES = {
    CAP_ORDERS_WRITE,
    CAP_CLIENTS_WRITE,
    CAP_CATALOG_EDIT,
    CAP_REPORTS_VIEW,
    CAP_USERS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_USER: {
        CAP_ORDERS_WRITE,
        CAP_CLIENTS_WRITE,
        CAP_REPORTS_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_USERS_MANAGE
    """

    message = "Insufficient role"

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # Unset capability denies.
            return False

        return user_has_capability(request.user, required)


class ReadOrCapability(BasePermission):
    """
    Safe methods: any authenticated user.
    Writes: require view.required_write_capability.
    """

    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        if request.method in SAFE_METHODS:
            return True

        required = getattr(view, "required_write_capability", None)
        if not required:
            return False

        return user_has_capability(user, required)
