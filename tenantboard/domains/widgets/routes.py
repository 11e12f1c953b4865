# tenantboard/domains/widgets/routes.py
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Request

from tenantboard.core.database import Database, get_db
from tenantboard.domains.widgets.models import WidgetResponse
from tenantboard.domains.widgets.service import WidgetService
from tenantboard.domains.widgets.store import PrismaWidgetStore
from tenantboard.shared.permissions import Principal
from tenantboard.shared.permissions.dependencies import get_principal

router = APIRouter(prefix="/dashboard/widgets", tags=["Dashboard Widgets"])


def get_widget_service(db: Database = Depends(get_db)) -> WidgetService:
    return WidgetService(PrismaWidgetStore(db))


@router.get(
    "",
    response_model=Dict[str, List[WidgetResponse]],
    operation_id="listDashboardWidgets",
)
async def list_widgets(
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> Dict[str, List[WidgetResponse]]:
    """
    List dashboard widgets visible to the caller.

    Requires analytics:read. Returns shared widgets of the caller's
    organization plus the caller's own widgets, in display order.
    """
    return {"widgets": await service.list_widgets(principal)}


@router.get(
    "/{widget_id}",
    response_model=WidgetResponse,
    operation_id="getDashboardWidget",
)
async def get_widget(
    widget_id: str,
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> WidgetResponse:
    """
    Get a single dashboard widget.

    Widgets of other organizations are reported as not found.
    """
    return await service.get_widget(principal, widget_id)


@router.post(
    "",
    response_model=WidgetResponse,
    operation_id="createDashboardWidget",
)
async def create_widget(
    request: Request,
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> WidgetResponse:
    """
    Create a dashboard widget owned by the caller.

    Requires analytics:write.
    """
    return await service.create_widget(principal, await request.body())


@router.put(
    "/{widget_id}",
    response_model=WidgetResponse,
    operation_id="updateDashboardWidget",
)
async def update_widget(
    widget_id: str,
    request: Request,
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> WidgetResponse:
    """
    Update a dashboard widget.

    Requires analytics:write and ownership of the widget. Only the fields
    present in the request body are changed.
    """
    return await service.update_widget(principal, widget_id, await request.body())


@router.delete(
    "/{widget_id}",
    operation_id="deleteDashboardWidget",
)
async def delete_widget(
    widget_id: str,
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> Dict[str, str]:
    """
    Delete a dashboard widget.

    Requires analytics:delete and ownership of the widget.
    """
    await service.delete_widget(principal, widget_id)
    return {"message": "Widget deleted successfully"}


@router.post(
    "/reorder",
    operation_id="reorderDashboardWidgets",
)
async def reorder_widgets(
    request: Request,
    principal: Optional[Principal] = Depends(get_principal),
    service: WidgetService = Depends(get_widget_service),
) -> Dict[str, str]:
    """
    Reorder dashboard widgets.

    Body: {"widget_ids": [...]} in the new front-to-back order. Requires
    analytics:write; any id outside the caller's organization rejects the
    whole request.
    """
    await service.reorder_widgets(principal, await request.body())
    return {"message": "Widgets reordered successfully"}
