from typing import TYPE_CHECKING, Optional, Protocol

from .models import RoleGrants

if TYPE_CHECKING:
    from prisma import Prisma


class RoleStore(Protocol):
    """Source of the role grants attached to a user."""

    async def get_role_grants(
        self, user_id: str, organization_id: str
    ) -> Optional[RoleGrants]: ...


class PrismaRoleStore:
    """RoleStore backed by the User -> Role -> Permission tables."""

    def __init__(self, db: "Prisma"):
        self.db = db

    async def get_role_grants(
        self, user_id: str, organization_id: str
    ) -> Optional[RoleGrants]:
        """
        Load the role of a user within an organization.

        Args:
            user_id: User ID from the authenticated identity
            organization_id: Organization the user is acting in

        Returns:
            RoleGrants, or None if the user is unknown in the organization
            or has no role
        """
        user = await self.db.user.find_first(
            where={"id": user_id, "organizationId": organization_id},
            include={"role": {"include": {"permissions": True}}},
        )
        if not user or not user.role:
            return None

        role = user.role
        return RoleGrants(
            role_id=role.id,
            name=role.name,
            is_system=role.isSystem,
            permissions=tuple(
                (permission.resource, permission.action)
                for permission in (role.permissions or [])
            ),
        )
