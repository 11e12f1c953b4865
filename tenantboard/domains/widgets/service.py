# tenantboard/domains/widgets/service.py
import json
import logging
from typing import Any, List, NoReturn, Optional
from uuid import UUID

from pydantic import ValidationError

from tenantboard.core.settings import Settings, settings
from tenantboard.shared.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthenticatedError,
)
from tenantboard.shared.permissions import (
    Action,
    Principal,
    Resource,
    can_delete,
    can_list,
    can_read,
    can_write,
    has_permission,
)

from .models import WidgetCreate, WidgetRecord, WidgetResponse, WidgetUpdate
from .ownership import OwnershipResolver
from .store import WidgetStore

logger = logging.getLogger(__name__)

WIDGET_RESOURCE = Resource.ANALYTICS


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        text = item["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {text}" if location else text)
    return "; ".join(messages)


def _decode_body(payload: Any) -> Any:
    """Decode a raw request body; already-decoded payloads pass through."""
    if not isinstance(payload, (bytes, bytearray, str)):
        return payload
    if not payload.strip():
        return None
    try:
        return json.loads(payload)
    except (ValueError, UnicodeDecodeError):
        raise InvalidInputError("Request body must be valid JSON")


def _parse_widget_id(widget_id: Any) -> str:
    """Normalize a widget id, rejecting anything that is not a UUID."""
    try:
        return str(UUID(str(widget_id)))
    except (TypeError, ValueError, AttributeError):
        raise InvalidInputError("Invalid widget ID")


class WidgetService:
    """
    Dashboard widget operations.

    Every operation runs its checks in a fixed order and stops at the first
    failure: authentication, coarse permission, input shape, existence
    within the organization, ownership, payload validation. Nothing is
    written before all checks pass.
    """

    def __init__(self, store: WidgetStore, config: Optional[Settings] = None):
        self.store = store
        self.resolver = OwnershipResolver(store)
        self.config = config or settings

    async def list_widgets(self, principal: Optional[Principal]) -> List[WidgetResponse]:
        """
        List widgets visible to the principal.

        Returns:
            Widgets of the principal's organization that are shared or owned
            by the principal, ordered by display_order. May be empty.
        """
        principal = self._authenticate(principal)
        if not can_list(principal, WIDGET_RESOURCE):
            self._deny(principal, "list", None, "missing analytics:read")

        records = await self.store.find_visible(
            principal.organization_id, principal.user_id
        )
        return [
            WidgetResponse.from_record(record, principal.user_id)
            for record in records
            if can_read(principal, record.facts, WIDGET_RESOURCE)
        ]

    async def get_widget(
        self, principal: Optional[Principal], widget_id: Any
    ) -> WidgetResponse:
        principal = self._authenticate(principal)
        self._require(principal, Action.READ, "get")
        widget_id = _parse_widget_id(widget_id)

        record = await self._find(principal, widget_id)
        if not can_read(principal, record.facts, WIDGET_RESOURCE):
            self._deny(principal, "get", widget_id, "not shared and not owner")

        return WidgetResponse.from_record(record, principal.user_id)

    async def create_widget(
        self, principal: Optional[Principal], payload: Any
    ) -> WidgetResponse:
        """
        Create a widget owned by the principal in the principal's organization.

        The new widget is placed after the organization's current last widget.
        """
        principal = self._authenticate(principal)
        self._require(principal, Action.WRITE, "create")

        widget = self._parse(WidgetCreate, payload)

        current_max = await self.store.max_display_order(principal.organization_id)
        data = widget.model_dump(mode="json")
        data.update(
            {
                "organization_id": principal.organization_id,
                "user_id": principal.user_id,
                "display_order": 0 if current_max is None else current_max + 1,
                "is_default": False,
            }
        )
        record = await self.store.create(data)

        logger.info(
            f"Widget {record.id} created by {principal.user_id} "
            f"in organization {principal.organization_id}"
        )
        return WidgetResponse.from_record(record, principal.user_id)

    async def update_widget(
        self, principal: Optional[Principal], widget_id: Any, payload: Any
    ) -> WidgetResponse:
        """
        Apply a partial update. Only the owner may update, shared or not.

        Fields absent from the payload keep their stored values.
        """
        principal = self._authenticate(principal)
        self._require(principal, Action.WRITE, "update")
        widget_id = _parse_widget_id(widget_id)

        record = await self._find(principal, widget_id)
        if not can_write(principal, record.facts, WIDGET_RESOURCE):
            self._deny(principal, "update", widget_id, "not owner")

        updates = self._parse(WidgetUpdate, payload)
        changes = updates.model_dump(mode="json", exclude_unset=True)
        null_fields = sorted(key for key, value in changes.items() if value is None)
        if null_fields:
            raise InvalidInputError(f"Fields cannot be null: {', '.join(null_fields)}")

        if not changes:
            return WidgetResponse.from_record(record, principal.user_id)

        updated = await self.store.update(widget_id, changes)
        logger.info(
            f"Widget {widget_id} updated by {principal.user_id}: {sorted(changes)}"
        )
        return WidgetResponse.from_record(updated, principal.user_id)

    async def delete_widget(self, principal: Optional[Principal], widget_id: Any) -> None:
        principal = self._authenticate(principal)
        self._require(principal, Action.DELETE, "delete")
        widget_id = _parse_widget_id(widget_id)

        facts = await self.resolver.resolve(widget_id)
        if facts is None or facts.organization_id != principal.organization_id:
            raise NotFoundError("Widget not found")
        if not can_delete(principal, facts, WIDGET_RESOURCE):
            self._deny(principal, "delete", widget_id, "not owner")

        await self.store.delete(widget_id)
        logger.info(f"Widget {widget_id} deleted by {principal.user_id}")

    async def reorder_widgets(
        self, principal: Optional[Principal], widget_ids: Any
    ) -> None:
        """
        Set display_order to each widget's position in `widget_ids`.

        `widget_ids` is the id list itself, or a request body (raw JSON or
        decoded) of the form {"widget_ids": [...]}.

        All ids must be visible widgets of the principal's organization;
        otherwise nothing changes. Widgets not listed keep their order
        unless the configuration requires a complete permutation.

        Raises:
            UnauthenticatedError: No principal
            ForbiddenError: Missing analytics:write
            InvalidInputError: Empty, malformed or duplicate ids, or an
                incomplete permutation when one is required
            NotFoundError: Any id outside the organization's visible widgets
        """
        principal = self._authenticate(principal)
        self._require(principal, Action.WRITE, "reorder")

        widget_ids = _decode_body(widget_ids)
        if isinstance(widget_ids, dict):
            widget_ids = widget_ids.get("widget_ids")
        if not isinstance(widget_ids, list) or not widget_ids:
            raise InvalidInputError("widget_ids must be a non-empty list")
        ordered_ids = [_parse_widget_id(widget_id) for widget_id in widget_ids]
        if len(set(ordered_ids)) != len(ordered_ids):
            raise InvalidInputError("widget_ids contains duplicates")

        result = await self.store.reorder(
            principal.organization_id,
            principal.user_id,
            ordered_ids,
            require_complete=self.config.REORDER_REQUIRE_FULL_PERMUTATION,
        )
        if result.rejected_ids:
            logger.warning(
                f"Reorder by {principal.user_id} rejected: "
                f"{len(result.rejected_ids)} unknown widget id(s)"
            )
            raise NotFoundError("Widget not found")
        if result.incomplete:
            raise InvalidInputError("widget_ids must list every widget exactly once")

        logger.info(
            f"Reordered {len(ordered_ids)} widgets in organization "
            f"{principal.organization_id}"
        )

    def _authenticate(self, principal: Optional[Principal]) -> Principal:
        if principal is None:
            raise UnauthenticatedError()
        return principal

    def _require(self, principal: Principal, action: Action, operation: str) -> None:
        if not has_permission(principal, WIDGET_RESOURCE, action):
            self._deny(
                principal,
                operation,
                None,
                f"missing {WIDGET_RESOURCE.value}:{action.value}",
            )

    async def _find(self, principal: Principal, widget_id: str) -> WidgetRecord:
        record = await self.resolver.find_in_organization(
            widget_id, principal.organization_id
        )
        if record is None:
            raise NotFoundError("Widget not found")
        return record

    def _parse(self, model: Any, payload: Any) -> Any:
        payload = _decode_body(payload)
        if not isinstance(payload, dict):
            raise InvalidInputError("Request body must be a JSON object")
        try:
            return model(**payload)
        except ValidationError as e:
            raise InvalidInputError(_format_validation_error(e))

    def _deny(
        self,
        principal: Principal,
        operation: str,
        widget_id: Optional[str],
        reason: str,
    ) -> NoReturn:
        logger.info(
            f"Denied {operation} on widget {widget_id or '-'} for user "
            f"{principal.user_id} in {principal.organization_id}: {reason}"
        )
        raise ForbiddenError()
