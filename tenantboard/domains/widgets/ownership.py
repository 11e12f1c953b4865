from typing import Optional

from tenantboard.shared.permissions.models import OwnershipFacts

from .models import WidgetRecord
from .store import WidgetStore


class OwnershipResolver:
    """Loads ownership facts fresh from the store on every call."""

    def __init__(self, store: WidgetStore):
        self.store = store

    async def resolve(self, widget_id: str) -> Optional[OwnershipFacts]:
        """
        Look up the organization, owner and sharing flag of a widget.

        Args:
            widget_id: Widget ID (already validated as a UUID)

        Returns:
            OwnershipFacts, or None if no widget has this id
        """
        record = await self.store.find_by_id(widget_id)
        return record.facts if record else None

    async def find_in_organization(
        self, widget_id: str, organization_id: str
    ) -> Optional[WidgetRecord]:
        """
        Load a widget only if it belongs to the given organization.

        Used by operations that need the full record as well as its facts;
        delete works from `resolve` alone. A widget of another organization
        is reported exactly like a missing one.
        """
        record = await self.store.find_by_id(widget_id)
        if record is None or record.organization_id != organization_id:
            return None
        return record
