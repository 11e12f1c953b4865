from enum import Enum
from typing import NamedTuple, Optional


class Resource(Enum):
    """
    Resource categories that permissions are granted on.

    Dashboard widgets live under ANALYTICS.
    """

    ANALYTICS = "analytics"
    CONTACTS = "contacts"
    MESSAGES = "messages"
    TEMPLATES = "templates"
    USERS = "users"
    ROLES = "roles"
    SETTINGS = "settings"


class Action(Enum):
    """
    Actions a grant allows on a resource category.

    MANAGE is an explicit override used for resources without an owner
    (system defaults); it never implies ownership of owned resources.
    """

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    MANAGE = "manage"


class Grant(NamedTuple):
    """A single (resource, action) permission."""

    resource: Resource
    action: Action

    def __str__(self) -> str:
        return f"{self.resource.value}:{self.action.value}"


def parse_grant(resource: str, action: str) -> Optional[Grant]:
    """
    Build a Grant from stored strings.

    Args:
        resource: Resource category name, e.g. "analytics"
        action: Action name, e.g. "read"

    Returns:
        The Grant, or None if either part is not a known value
    """
    try:
        return Grant(Resource(resource.strip().lower()), Action(action.strip().lower()))
    except ValueError:
        return None


def parse_grant_string(value: str) -> Optional[Grant]:
    """Parse a "resource:action" string as used in role templates."""
    resource, sep, action = value.partition(":")
    if not sep:
        return None
    return parse_grant(resource, action)


class RoleGrants(NamedTuple):
    """A role as loaded from the role store, before catalog resolution."""

    role_id: str
    name: str
    is_system: bool
    permissions: tuple[tuple[str, str], ...] = ()


class OwnershipFacts(NamedTuple):
    """The parts of a resource needed for instance-level authorization."""

    organization_id: str
    owner_user_id: Optional[str]
    is_shared: bool
