"""条目累积测试"""

from unittest.mock import MagicMock

import pytest

from autopager.pagination.accumulator import accumulate
from autopager.pagination.context import PaginationContext
from autopager.pagination.models import PaginationEventHandlers


def _ctx(**kwargs) -> PaginationContext:
    return PaginationContext(page=None, extract_items=lambda page, html: [], **kwargs)


def _by_id(item, existing):
    return any(other["id"] == item["id"] for other in existing)


class TestAccumulate:
    @pytest.mark.asyncio
    async def test_without_predicate_keeps_everything(self):
        ctx = _ctx()

        accepted = await accumulate(ctx, [{"id": 1}, {"id": 1}])

        assert accepted == [{"id": 1}, {"id": 1}]
        assert ctx.state.total_items == 2

    @pytest.mark.asyncio
    async def test_predicate_sees_items_accepted_in_same_batch(self):
        ctx = _ctx(is_duplicate=_by_id)
        ctx.items.append({"id": 1})

        accepted = await accumulate(ctx, [{"id": 1}, {"id": 2}, {"id": 2}, {"id": 3}])

        assert accepted == [{"id": 2}, {"id": 3}]
        assert [item["id"] for item in ctx.items] == [1, 2, 3]
        assert ctx.state.total_items == 2

    @pytest.mark.asyncio
    async def test_async_predicate_is_awaited(self):
        async def by_id(item, existing):
            return _by_id(item, existing)

        ctx = _ctx(is_duplicate=by_id)

        accepted = await accumulate(ctx, [{"id": 1}, {"id": 1}, {"id": 2}])

        assert accepted == [{"id": 1}, {"id": 2}]
        assert ctx.state.total_items == 2

    @pytest.mark.asyncio
    async def test_include_duplicates_bypasses_predicate(self):
        predicate = MagicMock(return_value=True)
        ctx = _ctx(is_duplicate=predicate, include_duplicates=True)

        accepted = await accumulate(ctx, [{"id": 1}, {"id": 1}])

        assert len(accepted) == 2
        predicate.assert_not_called()

    @pytest.mark.asyncio
    async def test_stops_accepting_at_cap(self):
        ctx = _ctx()
        ctx.items.extend([{"id": 1}, {"id": 2}])

        accepted = await accumulate(ctx, [{"id": 3}, {"id": 4}, {"id": 5}], max_items=3)

        assert accepted == [{"id": 3}]
        assert len(ctx.items) == 3

    @pytest.mark.asyncio
    async def test_items_extracted_fires_once_with_whole_batch(self):
        calls = []
        ctx = _ctx(
            is_duplicate=_by_id,
            handlers=PaginationEventHandlers(
                on_items_extracted=lambda batch, n, state: calls.append((list(batch), n))
            ),
        )
        ctx.items.append({"id": 1})
        ctx.state.current_page = 4

        await accumulate(ctx, [{"id": 1}])

        assert calls == [([{"id": 1}], 4)]
