"""加载更多按钮执行器测试"""

import pytest

from autopager.pagination import LoadMoreButtonConfig, PaginationEventHandlers, StopReason
from autopager.pagination.controller import PaginationController


class TestLoadMoreButton:
    @pytest.mark.asyncio
    async def test_missing_button_ends_after_initial_harvest(
        self, fake_page_factory, opener_for, extract_ids, fast_defaults
    ):
        page = fake_page_factory(snapshots=["a1,a2"])
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com", LoadMoreButtonConfig(button_selector=".more"), extract_ids
        )

        assert result.stop_reason == StopReason.END_REACHED
        assert result.pages_processed == 0
        assert result.errors == []
        assert [item["id"] for item in result.items] == ["a1", "a2"]
        assert page.clicks == []

    @pytest.mark.asyncio
    async def test_clicks_until_max_pages(
        self, fake_page_factory, opener_for, extract_ids, dedup_by_id, fast_defaults
    ):
        page = fake_page_factory(
            snapshots=["a1", "a1,a2", "a1,a2,a3", "a1,a2,a3,a4"],
            visible={".more"},
            on_click={".more": lambda p: p.advance()},
        )
        started, completed, extracted = [], [], []
        handlers = PaginationEventHandlers(
            on_page_start=lambda n, state: started.append(n),
            on_page_complete=lambda n, items, state: completed.append((n, len(items))),
            on_items_extracted=lambda batch, n, state: extracted.append(len(batch)),
        )
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com",
            LoadMoreButtonConfig(button_selector=".more", max_pages=2),
            extract_ids,
            is_duplicate=dedup_by_id,
            event_handlers=handlers,
        )

        assert result.stop_reason == StopReason.MAX_PAGES
        assert result.pages_processed == 2
        assert page.clicks == [".more", ".more"]
        assert [item["id"] for item in result.items] == ["a1", "a2", "a3"]
        assert started == [0, 1]
        assert completed == [(0, 1), (1, 1)]
        # 初始快照也会触发一次 on_items_extracted
        assert extracted == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_falls_back_to_alternative_selector(
        self, fake_page_factory, opener_for, extract_ids, dedup_by_id, fast_defaults
    ):
        def visible(page, selector):
            return selector == "button.load" and page.index == 0

        page = fake_page_factory(
            snapshots=["a1", "a1,a2"],
            visible=visible,
            on_click={"button.load": lambda p: p.advance()},
        )
        config = LoadMoreButtonConfig(
            button_selector=".more", alternative_selectors=["button.load"]
        )
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com", config, extract_ids, is_duplicate=dedup_by_id
        )

        assert page.clicks == ["button.load"]
        assert result.pages_processed == 1
        assert result.stop_reason == StopReason.END_REACHED
        assert len(result.items) == 2
