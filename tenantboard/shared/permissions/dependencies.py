from functools import lru_cache
from typing import Optional

from fastapi import Depends

from tenantboard.core.database import Database, get_db
from tenantboard.core.settings import settings
from tenantboard.domains.auth.dependencies import get_identity

from .catalog import PermissionCatalog
from .principal import Identity, Principal, build_principal
from .store import PrismaRoleStore


@lru_cache
def get_catalog() -> PermissionCatalog:
    """Permission catalog built once from the configured role templates."""
    return PermissionCatalog.from_settings(settings)


async def get_principal(
    identity: Optional[Identity] = Depends(get_identity),
    db: Database = Depends(get_db),
    catalog: PermissionCatalog = Depends(get_catalog),
) -> Optional[Principal]:
    """
    Resolve the request's Principal.

    Returns None for unauthenticated requests instead of raising, so the
    service layer reports Unauthenticated ahead of every other check.

    Args:
        identity: Ids decoded from the bearer token, if any
        db: Database connection
        catalog: Permission catalog

    Returns:
        Principal, or None when the request is not authenticated
    """
    if identity is None:
        return None
    return await build_principal(identity, PrismaRoleStore(db), catalog)
