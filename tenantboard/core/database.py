# tenantboard/core/database.py
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from prisma import Prisma as Database
else:
    Database = Any

# Global Prisma instance, created on first use (requires `prisma generate`)
_prisma: Optional[Database] = None


def get_client() -> Database:
    """Return the process-wide Prisma client."""
    global _prisma
    if _prisma is None:
        from prisma import Prisma

        _prisma = Prisma()
    return _prisma


async def get_db() -> Database:
    """Database dependency for FastAPI dependency injection."""
    return get_client()
