"""
Role → capability table.
Built once at import time and exposed read-only; nothing is persisted per user.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, FrozenSet


class Permission(str, Enum):
    MANAGE_USERS = "canManageUsers"
    DELETE_ALL_USERS = "canDeleteAllUsers"
    MANAGE_ALL_PETS = "canManageAllPets"
    VIEW_ALL_PETS = "canViewAllPets"
    EDIT_ALL_PETS = "canEditAllPets"
    DELETE_ALL_PETS = "canDeleteAllPets"
    VIEW_DASHBOARD = "canViewDashboard"
    VIEW_USER_MANAGEMENT = "canViewUserManagement"
    VIEW_OWN_PETS = "canViewOwnPets"
    EDIT_OWN_PETS = "canEditOwnPets"


# Keys are the numeric userType values (1 = admin, 2 = pet owner)
PERMISSIONS: Mapping[int, FrozenSet[Permission]] = MappingProxyType({
    1: frozenset(Permission),
    2: frozenset({
        Permission.VIEW_DASHBOARD,
        Permission.VIEW_OWN_PETS,
        Permission.EDIT_OWN_PETS,
    }),
})


def is_known_role(role) -> bool:
    return role in PERMISSIONS


def check_user_permission(role, permission) -> bool:
    """Return True when `role` is granted `permission`. Unknown names are denied."""
    try:
        permission = Permission(permission)
    except ValueError:
        return False
    return permission in PERMISSIONS.get(role, frozenset())


def permissions_for(role) -> dict[str, bool]:
    """Full capability map for a role, as the frontend consumes it."""
    granted = PERMISSIONS.get(role, frozenset())
    return {p.value: p in granted for p in Permission}
