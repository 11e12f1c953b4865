#!/usr/bin/env python3
import asyncio
import sys
from pathlib import Path

import jwt

# Add the project root to Python path so we can import from tenantboard
project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from prisma import Prisma  # noqa: E402

from tenantboard.core.settings import settings  # noqa: E402
from tenantboard.domains.widgets.defaults import seed_default_widgets  # noqa: E402
from tenantboard.domains.widgets.store import PrismaWidgetStore  # noqa: E402
from tenantboard.shared.permissions import PermissionCatalog  # noqa: E402
from tenantboard.shared.permissions.catalog import ALL_GRANTS  # noqa: E402

ORG_ID = "42f929b1-8fdb-45b1-a7cf-34fae2314561"


async def seed_permissions(prisma: Prisma) -> dict[str, str]:
    """Create one Permission row per (resource, action) grant."""
    permission_ids = {}
    for grant in sorted(ALL_GRANTS, key=str):
        permission = await prisma.permission.upsert(
            where={
                "resource_action": {
                    "resource": grant.resource.value,
                    "action": grant.action.value,
                }
            },
            data={
                "create": {
                    "resource": grant.resource.value,
                    "action": grant.action.value,
                },
                "update": {},
            },
        )
        permission_ids[str(grant)] = permission.id
    print(f"✅ Permissions ready: {len(permission_ids)}")
    return permission_ids


async def seed_roles(
    prisma: Prisma, catalog: PermissionCatalog, permission_ids: dict[str, str]
) -> dict[str, str]:
    """Create the system roles of the organization from the role templates."""
    role_ids = {}
    for name in catalog.template_names:
        connect = [
            {"id": permission_ids[str(grant)]} for grant in catalog.template(name)
        ]
        role = await prisma.role.upsert(
            where={"organizationId_name": {"organizationId": ORG_ID, "name": name}},
            data={
                "create": {
                    "organizationId": ORG_ID,
                    "name": name,
                    "isSystem": True,
                    "isDefault": name == "agent",
                    "permissions": {"connect": connect},
                },
                "update": {"permissions": {"set": connect}},
            },
        )
        role_ids[name] = role.id
        print(f"✅ Role {name}: {len(connect)} grants")
    return role_ids


async def main():
    print("🌱 Starting database seed...")

    prisma = Prisma()
    await prisma.connect()

    try:
        existing_org = await prisma.organization.find_unique(where={"id": ORG_ID})
        if not existing_org:
            await prisma.organization.create(
                data={"id": ORG_ID, "name": "Test Organization"}
            )
            print(f"✅ Created organization: {ORG_ID}")
        else:
            print(f"ℹ️ Organization already exists: {ORG_ID}")

        catalog = PermissionCatalog.from_settings(settings)
        permission_ids = await seed_permissions(prisma)
        role_ids = await seed_roles(prisma, catalog, permission_ids)

        for name, role_id in role_ids.items():
            email = f"{name}@example.com"
            user = await prisma.user.upsert(
                where={"email": email},
                data={
                    "create": {
                        "email": email,
                        "fullName": name.title(),
                        "organizationId": ORG_ID,
                        "roleId": role_id,
                    },
                    "update": {"roleId": role_id},
                },
            )
            print(f"✅ User {email} ({user.id})")

            if settings.JWT_SECRET:
                token = jwt.encode(
                    {"sub": user.id, settings.JWT_ORG_CLAIM: ORG_ID, "email": email},
                    settings.JWT_SECRET,
                    algorithm=settings.JWT_ALGORITHM,
                )
                print(f"   🔑 Token: {token}")

        created = await seed_default_widgets(PrismaWidgetStore(prisma), ORG_ID)
        print(f"✅ Default widgets created: {len(created)}")

        print("🎉 Seed completed")
    finally:
        await prisma.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
