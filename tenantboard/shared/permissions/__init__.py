"""
Shared permission system for role-based access control.

This module provides the permission catalog, the per-request Principal
and the pure authorization decisions used across all domains.

Usage:
    from tenantboard.shared.permissions import Action, Resource, has_permission

    if not has_permission(principal, Resource.ANALYTICS, Action.WRITE):
        raise ForbiddenError()
"""

from .catalog import PermissionCatalog
from .models import Action, Grant, OwnershipFacts, Resource, RoleGrants
from .principal import Identity, Principal, build_principal
from .services import can_delete, can_list, can_read, can_write, has_permission

__all__ = [
    "Action",
    "Grant",
    "Identity",
    "OwnershipFacts",
    "PermissionCatalog",
    "Principal",
    "Resource",
    "RoleGrants",
    "build_principal",
    "can_delete",
    "can_list",
    "can_read",
    "can_write",
    "has_permission",
]
