"""
Authorization decisions.

Every function here is pure: no I/O and no hidden state. Coarse grants are
a necessary precondition for every decision; ownership never substitutes
for a missing grant.
"""

from .models import Action, Grant, OwnershipFacts, Resource
from .principal import Principal


def has_permission(principal: Principal, resource: Resource, action: Action) -> bool:
    """
    Check if a principal holds a specific coarse grant.

    Args:
        principal: The principal to check
        resource: Resource category
        action: Action on the category

    Returns:
        True if the principal's role grants (resource, action), False otherwise
    """
    if not isinstance(resource, Resource) or not isinstance(action, Action):
        return False
    return Grant(resource, action) in principal.permissions


def can_list(principal: Principal, resource: Resource) -> bool:
    """Coarse gate for list operations."""
    return has_permission(principal, resource, Action.READ)


def can_read(
    principal: Principal,
    facts: OwnershipFacts,
    resource: Resource = Resource.ANALYTICS,
) -> bool:
    """Same organization, `read` grant, and shared or owned by the principal."""
    if facts.organization_id != principal.organization_id:
        return False
    if not has_permission(principal, resource, Action.READ):
        return False
    return facts.is_shared or _is_owner(principal, facts)


def can_write(
    principal: Principal,
    facts: OwnershipFacts,
    resource: Resource = Resource.ANALYTICS,
) -> bool:
    """Visible, `write` grant, and owned by the principal. Sharing is irrelevant."""
    return _can_mutate(principal, facts, resource, Action.WRITE)


def can_delete(
    principal: Principal,
    facts: OwnershipFacts,
    resource: Resource = Resource.ANALYTICS,
) -> bool:
    """Visible, `delete` grant, and owned by the principal. Sharing is irrelevant."""
    return _can_mutate(principal, facts, resource, Action.DELETE)


def _can_mutate(
    principal: Principal,
    facts: OwnershipFacts,
    resource: Resource,
    action: Action,
) -> bool:
    if not can_read(principal, facts, resource):
        return False
    if not has_permission(principal, resource, action):
        return False

    # Ownerless resources require the explicit manage override
    if facts.owner_user_id is None:
        return has_permission(principal, resource, Action.MANAGE)

    return _is_owner(principal, facts)


def _is_owner(principal: Principal, facts: OwnershipFacts) -> bool:
    return facts.owner_user_id is not None and facts.owner_user_id == principal.user_id
