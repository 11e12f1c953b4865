import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from tenantboard.shared.exceptions import UnauthenticatedError

from .catalog import PermissionCatalog
from .models import Grant
from .store import RoleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Organization and user ids as supplied by the authentication layer."""

    organization_id: Optional[str]
    user_id: Optional[str]


@dataclass(frozen=True)
class Principal:
    """Authenticated user acting inside one organization, scoped to a request."""

    organization_id: str
    user_id: str
    permissions: FrozenSet[Grant] = field(default_factory=frozenset)


async def build_principal(
    identity: Optional[Identity],
    role_store: RoleStore,
    catalog: PermissionCatalog,
) -> Principal:
    """
    Construct the Principal for a request.

    Args:
        identity: Ids from the authentication layer, None if unauthenticated
        role_store: Source of the user's role grants
        catalog: Permission catalog used to resolve the role

    Returns:
        Principal with the user's effective grant set

    Raises:
        UnauthenticatedError: If there is no identity or either id is missing
    """
    if identity is None or not identity.organization_id or not identity.user_id:
        raise UnauthenticatedError()

    role = await role_store.get_role_grants(identity.user_id, identity.organization_id)
    permissions = catalog.resolve(role)

    logger.debug(
        f"Principal {identity.user_id} in {identity.organization_id} "
        f"resolved {len(permissions)} grants"
    )
    return Principal(
        organization_id=identity.organization_id,
        user_id=identity.user_id,
        permissions=permissions,
    )
