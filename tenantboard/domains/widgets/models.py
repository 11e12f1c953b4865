# tenantboard/domains/widgets/models.py
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from tenantboard.core.settings import settings
from tenantboard.shared.permissions.models import OwnershipFacts

if TYPE_CHECKING:
    from prisma.models import DashboardWidget


def _check_allowed(value: Optional[str], allowed: List[str], label: str) -> Optional[str]:
    if value is None:
        return value
    if value not in allowed:
        raise ValueError(f"Invalid {label} '{value}'. Allowed: {', '.join(allowed)}")
    return value


class WidgetFilter(BaseModel):
    field: str
    operator: str
    value: Any = None

    @field_validator("field")
    @classmethod
    def validate_field(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Filter field is required")
        return v

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, v: str) -> str:
        return _check_allowed(v, settings.WIDGET_FILTER_OPERATORS, "filter operator")


class WidgetCreate(BaseModel):
    """Request model for creating a dashboard widget"""

    name: str
    description: str = ""
    data_source: str
    metric: str = "count"
    display_type: str = "number"
    filters: List[WidgetFilter] = Field(default_factory=list)
    config: Dict[str, Any] = Field(default_factory=dict)
    show_change: bool = True
    color: str = ""
    size: str = "small"
    is_shared: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("data_source")
    @classmethod
    def validate_data_source(cls, v: str) -> str:
        return _check_allowed(v, settings.WIDGET_DATA_SOURCES, "data source")

    @field_validator("metric")
    @classmethod
    def validate_metric(cls, v: str) -> str:
        return _check_allowed(v, settings.WIDGET_METRICS, "metric")

    @field_validator("display_type")
    @classmethod
    def validate_display_type(cls, v: str) -> str:
        return _check_allowed(v, settings.WIDGET_DISPLAY_TYPES, "display type")

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: str) -> str:
        return _check_allowed(v, settings.WIDGET_SIZES, "size")


class WidgetUpdate(BaseModel):
    """
    Request model for a partial widget update.

    Only fields present in the request are applied; use
    `model_dump(exclude_unset=True)` to get them.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    data_source: Optional[str] = None
    metric: Optional[str] = None
    display_type: Optional[str] = None
    filters: Optional[List[WidgetFilter]] = None
    config: Optional[Dict[str, Any]] = None
    show_change: Optional[bool] = None
    color: Optional[str] = None
    size: Optional[str] = None
    is_shared: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator("data_source")
    @classmethod
    def validate_data_source(cls, v: Optional[str]) -> Optional[str]:
        return _check_allowed(v, settings.WIDGET_DATA_SOURCES, "data source")

    @field_validator("metric")
    @classmethod
    def validate_metric(cls, v: Optional[str]) -> Optional[str]:
        return _check_allowed(v, settings.WIDGET_METRICS, "metric")

    @field_validator("display_type")
    @classmethod
    def validate_display_type(cls, v: Optional[str]) -> Optional[str]:
        return _check_allowed(v, settings.WIDGET_DISPLAY_TYPES, "display type")

    @field_validator("size")
    @classmethod
    def validate_size(cls, v: Optional[str]) -> Optional[str]:
        return _check_allowed(v, settings.WIDGET_SIZES, "size")


class ReorderRequest(BaseModel):
    """Request model for reordering widgets front-to-back"""

    widget_ids: List[str]


class WidgetRecord(BaseModel):
    """A stored widget, independent of the persistence client."""

    id: str
    organization_id: str
    user_id: Optional[str] = None
    name: str
    description: str = ""
    data_source: str
    metric: str = "count"
    display_type: str = "number"
    filters: List[Dict[str, Any]] = Field(default_factory=list)
    config: Dict[str, Any] = Field(default_factory=dict)
    show_change: bool = True
    color: str = ""
    size: str = "small"
    display_order: int = 0
    is_shared: bool = False
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def facts(self) -> OwnershipFacts:
        return OwnershipFacts(
            organization_id=self.organization_id,
            owner_user_id=self.user_id,
            is_shared=self.is_shared,
        )

    @classmethod
    def from_prisma(cls, widget: "DashboardWidget") -> "WidgetRecord":
        return cls(
            id=widget.id,
            organization_id=widget.organizationId,
            user_id=widget.userId,
            name=widget.name,
            description=widget.description or "",
            data_source=widget.dataSource,
            metric=widget.metric,
            display_type=widget.displayType,
            filters=list(widget.filters or []),
            config=dict(widget.config or {}),
            show_change=widget.showChange,
            color=widget.color or "",
            size=widget.size,
            display_order=widget.displayOrder,
            is_shared=widget.isShared,
            is_default=widget.isDefault,
            created_at=widget.createdAt,
            updated_at=widget.updatedAt,
        )


class WidgetResponse(BaseModel):
    """Response model for dashboard widget data"""

    id: str
    name: str
    description: str
    data_source: str
    metric: str
    display_type: str
    filters: List[Dict[str, Any]]
    config: Dict[str, Any]
    show_change: bool
    color: str
    size: str
    display_order: int
    user_id: Optional[str] = None
    is_shared: bool
    is_default: bool
    is_owner: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: WidgetRecord, viewer_id: str) -> "WidgetResponse":
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            data_source=record.data_source,
            metric=record.metric,
            display_type=record.display_type,
            filters=record.filters,
            config=record.config,
            show_change=record.show_change,
            color=record.color,
            size=record.size,
            display_order=record.display_order,
            user_id=record.user_id,
            is_shared=record.is_shared,
            is_default=record.is_default,
            is_owner=record.user_id is not None and record.user_id == viewer_id,
            created_at=record.created_at.isoformat() if record.created_at else None,
            updated_at=record.updated_at.isoformat() if record.updated_at else None,
        )
