import logging
from typing import Any, Dict, List

from .models import WidgetCreate, WidgetRecord
from .store import WidgetStore

logger = logging.getLogger(__name__)

# System widgets every organization starts with. They have no owner, are
# shared with the whole organization and can only be changed by holders of
# the analytics:manage override.
DEFAULT_WIDGETS: List[Dict[str, Any]] = [
    {
        "name": "Total Messages",
        "description": "Messages sent and received",
        "data_source": "messages",
        "metric": "count",
        "display_type": "number",
        "color": "blue",
    },
    {
        "name": "Total Contacts",
        "description": "Contacts in the organization",
        "data_source": "contacts",
        "metric": "count",
        "display_type": "number",
        "color": "green",
    },
    {
        "name": "Active Sessions",
        "description": "Conversations currently in progress",
        "data_source": "sessions",
        "metric": "count",
        "display_type": "number",
        "color": "purple",
    },
    {
        "name": "Agent Transfers",
        "description": "Conversations handed over to an agent",
        "data_source": "transfers",
        "metric": "count",
        "display_type": "number",
        "color": "orange",
    },
]


async def seed_default_widgets(
    store: WidgetStore, organization_id: str
) -> List[WidgetRecord]:
    """
    Create the default widgets for an organization.

    Does nothing if the organization already has default widgets.

    Args:
        store: Widget store
        organization_id: Organization to seed

    Returns:
        The widgets created (empty if defaults already existed)
    """
    if await store.count_defaults(organization_id) > 0:
        logger.info(f"Default widgets already present for {organization_id}")
        return []

    current_max = await store.max_display_order(organization_id)
    next_order = 0 if current_max is None else current_max + 1

    created = []
    for offset, template in enumerate(DEFAULT_WIDGETS):
        data = WidgetCreate(**template, is_shared=True).model_dump(mode="json")
        data.update(
            {
                "organization_id": organization_id,
                "user_id": None,
                "display_order": next_order + offset,
                "is_default": True,
            }
        )
        created.append(await store.create(data))

    logger.info(f"Seeded {len(created)} default widgets for {organization_id}")
    return created
