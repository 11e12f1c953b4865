# tenantboard/domains/widgets/store.py
import logging
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Protocol

from .models import WidgetRecord

if TYPE_CHECKING:
    from prisma import Prisma

logger = logging.getLogger(__name__)

# Record field name -> DashboardWidget column
FIELD_MAP: Dict[str, str] = {
    "organization_id": "organizationId",
    "user_id": "userId",
    "name": "name",
    "description": "description",
    "data_source": "dataSource",
    "metric": "metric",
    "display_type": "displayType",
    "filters": "filters",
    "config": "config",
    "show_change": "showChange",
    "color": "color",
    "size": "size",
    "display_order": "displayOrder",
    "is_shared": "isShared",
    "is_default": "isDefault",
}

JSON_FIELDS = {"filters", "config"}


class ReorderResult(NamedTuple):
    """Outcome of a reorder; nothing was written unless `applied` is true."""

    rejected_ids: List[str]
    incomplete: bool = False

    @property
    def applied(self) -> bool:
        return not self.rejected_ids and not self.incomplete


class WidgetStore(Protocol):
    """Persistence primitives for dashboard widgets."""

    async def find_by_id(self, widget_id: str) -> Optional[WidgetRecord]: ...

    async def find_visible(
        self, organization_id: str, user_id: str
    ) -> List[WidgetRecord]: ...

    async def max_display_order(self, organization_id: str) -> Optional[int]: ...

    async def count_defaults(self, organization_id: str) -> int: ...

    async def create(self, data: Dict[str, Any]) -> WidgetRecord: ...

    async def update(self, widget_id: str, changes: Dict[str, Any]) -> WidgetRecord: ...

    async def delete(self, widget_id: str) -> None: ...

    async def reorder(
        self,
        organization_id: str,
        user_id: str,
        ordered_ids: List[str],
        require_complete: bool = False,
    ) -> ReorderResult: ...


def _json(value: Any) -> Any:
    from prisma import Json

    return Json(value)


def _to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    columns = {}
    for key, value in data.items():
        if key not in FIELD_MAP:
            raise KeyError(f"Unknown widget field: {key}")
        columns[FIELD_MAP[key]] = _json(value) if key in JSON_FIELDS else value
    return columns


class PrismaWidgetStore:
    """WidgetStore backed by the DashboardWidget table."""

    def __init__(self, db: "Prisma"):
        self.db = db

    async def find_by_id(self, widget_id: str) -> Optional[WidgetRecord]:
        widget = await self.db.dashboardwidget.find_unique(where={"id": widget_id})
        return WidgetRecord.from_prisma(widget) if widget else None

    async def find_visible(
        self, organization_id: str, user_id: str
    ) -> List[WidgetRecord]:
        """
        Widgets of an organization that are shared or owned by the user.

        Ordered by displayOrder, ties broken by creation order.
        """
        widgets = await self.db.dashboardwidget.find_many(
            where={
                "organizationId": organization_id,
                "OR": [{"isShared": True}, {"userId": user_id}],
            },
            order=[{"displayOrder": "asc"}, {"createdAt": "asc"}],
        )
        return [WidgetRecord.from_prisma(widget) for widget in widgets]

    async def max_display_order(self, organization_id: str) -> Optional[int]:
        widget = await self.db.dashboardwidget.find_first(
            where={"organizationId": organization_id},
            order={"displayOrder": "desc"},
        )
        return widget.displayOrder if widget else None

    async def count_defaults(self, organization_id: str) -> int:
        return await self.db.dashboardwidget.count(
            where={"organizationId": organization_id, "isDefault": True}
        )

    async def create(self, data: Dict[str, Any]) -> WidgetRecord:
        widget = await self.db.dashboardwidget.create(data=_to_columns(data))
        return WidgetRecord.from_prisma(widget)

    async def update(self, widget_id: str, changes: Dict[str, Any]) -> WidgetRecord:
        widget = await self.db.dashboardwidget.update(
            where={"id": widget_id}, data=_to_columns(changes)
        )
        if widget is None:
            raise LookupError(f"Widget {widget_id} disappeared during update")
        return WidgetRecord.from_prisma(widget)

    async def delete(self, widget_id: str) -> None:
        await self.db.dashboardwidget.delete(where={"id": widget_id})

    async def reorder(
        self,
        organization_id: str,
        user_id: str,
        ordered_ids: List[str],
        require_complete: bool = False,
    ) -> ReorderResult:
        """
        Assign displayOrder = position for each id, atomically.

        The organization's rows are locked for the duration of the
        transaction so concurrent reorders of the same organization
        serialize. Ids that are not visible widgets of the organization
        reject the whole call and nothing is written.

        Args:
            organization_id: Organization of the requesting principal
            user_id: Requesting user, for shared/owned visibility
            ordered_ids: Widget ids in their new front-to-back order
            require_complete: Require every visible widget to be listed

        Returns:
            ReorderResult describing rejected ids or incompleteness
        """
        async with self.db.tx() as transaction:
            rows = await transaction.query_raw(
                'SELECT "id", "userId", "isShared" FROM "DashboardWidget" '
                'WHERE "organizationId" = $1 FOR UPDATE',
                organization_id,
            )
            visible = {
                row["id"]
                for row in rows
                if row["isShared"] or row["userId"] == user_id
            }

            rejected = [widget_id for widget_id in ordered_ids if widget_id not in visible]
            if rejected:
                return ReorderResult(rejected_ids=rejected)

            if require_complete and set(ordered_ids) != visible:
                return ReorderResult(rejected_ids=[], incomplete=True)

            for index, widget_id in enumerate(ordered_ids):
                await transaction.dashboardwidget.update(
                    where={"id": widget_id}, data={"displayOrder": index}
                )

        logger.debug(
            f"Reordered {len(ordered_ids)} widgets for organization {organization_id}"
        )
        return ReorderResult(rejected_ids=[])
