"""
Tests for widget reordering in tenantboard/domains/widgets/service.py
"""

import asyncio
from uuid import uuid4

import pytest

from tenantboard.core.settings import Settings
from tenantboard.domains.widgets.service import WidgetService
from tenantboard.shared.exceptions import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from tests.fixtures.widget_fixtures import (
    MEMBER_ID,
    ORG_ID,
    OTHER_ORG_ID,
    add_widget,
)


async def add_widgets(store, count: int, **kwargs):
    return [
        await add_widget(store, name=f"Widget {index}", display_order=index, **kwargs)
        for index in range(count)
    ]


class TestReorderWidgets:
    @pytest.mark.asyncio
    async def test_assigns_positions(self, widget_service, widget_store, owner):
        w1, w2, w3 = await add_widgets(widget_store, 3)

        await widget_service.reorder_widgets(owner, [w3.id, w1.id, w2.id])

        assert widget_store.rows[w3.id].display_order == 0
        assert widget_store.rows[w1.id].display_order == 1
        assert widget_store.rows[w2.id].display_order == 2
        listed = await widget_service.list_widgets(owner)
        assert [w.id for w in listed] == [w3.id, w1.id, w2.id]

    @pytest.mark.asyncio
    async def test_partial_reorder_leaves_others_untouched(
        self, widget_service, widget_store, owner
    ):
        w1, w2, w3 = await add_widgets(widget_store, 3)
        widget_store.rows[w3.id] = widget_store.rows[w3.id].model_copy(
            update={"display_order": 9}
        )

        await widget_service.reorder_widgets(owner, [w2.id, w1.id])

        assert widget_store.rows[w2.id].display_order == 0
        assert widget_store.rows[w1.id].display_order == 1
        assert widget_store.rows[w3.id].display_order == 9

    @pytest.mark.asyncio
    async def test_foreign_id_rejects_whole_call(
        self, widget_service, widget_store, owner
    ):
        """An id from another organization writes nothing and reports NotFound."""
        own = await add_widget(widget_store, name="Org1 Widget", display_order=5)
        foreign = await add_widget(
            widget_store, organization_id=OTHER_ORG_ID, user_id=None, display_order=3
        )

        with pytest.raises(NotFoundError):
            await widget_service.reorder_widgets(owner, [own.id, foreign.id])

        assert widget_store.rows[own.id].display_order == 5
        assert widget_store.rows[foreign.id].display_order == 3
        assert widget_store.write_calls == 2

    @pytest.mark.asyncio
    async def test_unknown_id_rejects_whole_call(
        self, widget_service, widget_store, owner
    ):
        own = await add_widget(widget_store, display_order=5)

        with pytest.raises(NotFoundError):
            await widget_service.reorder_widgets(owner, [own.id, str(uuid4())])

        assert widget_store.rows[own.id].display_order == 5

    @pytest.mark.asyncio
    async def test_private_widget_of_other_user_is_rejected(
        self, widget_service, widget_store, member
    ):
        private = await add_widget(widget_store, is_shared=False, display_order=4)
        shared = await add_widget(widget_store, is_shared=True, display_order=2)

        with pytest.raises(NotFoundError):
            await widget_service.reorder_widgets(member, [private.id, shared.id])

        assert widget_store.rows[private.id].display_order == 4
        assert widget_store.rows[shared.id].display_order == 2

    @pytest.mark.asyncio
    async def test_shared_widgets_of_others_can_be_reordered(
        self, widget_service, widget_store, member
    ):
        w1, w2 = await add_widgets(widget_store, 2)

        await widget_service.reorder_widgets(member, [w2.id, w1.id])

        assert widget_store.ordered_ids(ORG_ID) == [w2.id, w1.id]

    @pytest.mark.asyncio
    async def test_own_private_widget_can_be_reordered(
        self, widget_service, widget_store, member
    ):
        own = await add_widget(
            widget_store, user_id=MEMBER_ID, is_shared=False, display_order=3
        )
        shared = await add_widget(widget_store, display_order=1)

        await widget_service.reorder_widgets(member, [own.id, shared.id])

        assert widget_store.ordered_ids(ORG_ID) == [own.id, shared.id]

    @pytest.mark.asyncio
    async def test_read_only_role_is_forbidden(
        self, widget_service, widget_store, read_only_member
    ):
        w1, w2 = await add_widgets(widget_store, 2)

        with pytest.raises(ForbiddenError):
            await widget_service.reorder_widgets(read_only_member, [w2.id, w1.id])

        assert widget_store.ordered_ids(ORG_ID) == [w1.id, w2.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "widget_ids",
        [[], None, "not-a-list", {"widget_ids": []}, ["not-a-uuid"], [123]],
    )
    async def test_malformed_input(self, widget_service, widget_store, owner, widget_ids):
        with pytest.raises(InvalidInputError):
            await widget_service.reorder_widgets(owner, widget_ids)
        assert widget_store.write_calls == 0

    @pytest.mark.asyncio
    async def test_raw_json_body(self, widget_service, widget_store, owner):
        w1, w2 = await add_widgets(widget_store, 2)
        body = f'{{"widget_ids": ["{w2.id}", "{w1.id}"]}}'.encode()

        await widget_service.reorder_widgets(owner, body)

        assert widget_store.ordered_ids(ORG_ID) == [w2.id, w1.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"[1,", b"{not json", b"", b'{"widget_ids": "x"}'])
    async def test_malformed_raw_body(self, widget_service, widget_store, owner, body):
        with pytest.raises(InvalidInputError):
            await widget_service.reorder_widgets(owner, body)
        assert widget_store.write_calls == 0

    @pytest.mark.asyncio
    async def test_duplicate_ids(self, widget_service, widget_store, owner):
        w1, w2 = await add_widgets(widget_store, 2)

        with pytest.raises(InvalidInputError):
            await widget_service.reorder_widgets(owner, [w1.id, w2.id, w1.id])

        assert widget_store.rows[w1.id].display_order == 0
        assert widget_store.rows[w2.id].display_order == 1

    @pytest.mark.asyncio
    async def test_duplicate_ids_differing_in_case(
        self, widget_service, widget_store, owner
    ):
        widget = await add_widget(widget_store)

        with pytest.raises(InvalidInputError):
            await widget_service.reorder_widgets(owner, [widget.id, widget.id.upper()])

    @pytest.mark.asyncio
    async def test_forbidden_precedes_malformed_input(
        self, widget_service, read_only_member
    ):
        with pytest.raises(ForbiddenError):
            await widget_service.reorder_widgets(read_only_member, [])


class TestFullPermutation:
    @pytest.fixture
    def strict_service(self, widget_store) -> WidgetService:
        return WidgetService(
            widget_store, config=Settings(REORDER_REQUIRE_FULL_PERMUTATION=True)
        )

    @pytest.mark.asyncio
    async def test_incomplete_list_is_invalid(
        self, strict_service, widget_store, owner
    ):
        w1, w2, w3 = await add_widgets(widget_store, 3)

        with pytest.raises(InvalidInputError):
            await strict_service.reorder_widgets(owner, [w2.id, w1.id])

        assert widget_store.ordered_ids(ORG_ID) == [w1.id, w2.id, w3.id]

    @pytest.mark.asyncio
    async def test_complete_permutation_is_applied(
        self, strict_service, widget_store, owner
    ):
        w1, w2, w3 = await add_widgets(widget_store, 3)

        await strict_service.reorder_widgets(owner, [w3.id, w2.id, w1.id])

        assert widget_store.ordered_ids(ORG_ID) == [w3.id, w2.id, w1.id]

    @pytest.mark.asyncio
    async def test_permutation_covers_only_visible_widgets(
        self, strict_service, widget_store, member
    ):
        """Another user's private widget is not part of the member's permutation."""
        w1, w2 = await add_widgets(widget_store, 2)
        await add_widget(widget_store, is_shared=False, display_order=7)

        await strict_service.reorder_widgets(member, [w2.id, w1.id])

        assert widget_store.rows[w2.id].display_order == 0
        assert widget_store.rows[w1.id].display_order == 1


class TestConcurrentReorder:
    @pytest.mark.asyncio
    async def test_final_order_matches_one_request(
        self, widget_service, widget_store, owner, member
    ):
        """Two concurrent reorders never interleave into a mixed order."""
        w1, w2, w3 = await add_widgets(widget_store, 3)
        first = [w3.id, w2.id, w1.id]
        second = [w2.id, w1.id, w3.id]

        await asyncio.gather(
            widget_service.reorder_widgets(owner, first),
            widget_service.reorder_widgets(member, second),
        )

        assert widget_store.ordered_ids(ORG_ID) in (first, second)
        orders = sorted(widget_store.rows[i].display_order for i in first)
        assert orders == [0, 1, 2]
