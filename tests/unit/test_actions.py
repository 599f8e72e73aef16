"""页面交互工具测试"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from autopager.common.browser.actions import (
    SCROLL_BY_SCRIPT,
    SCROLL_TO_BOTTOM_SCRIPT,
    find_first_visible,
    scroll_page,
    wait_for_loading_cycle,
    wait_for_selector_quietly,
)


class TestScrollPage:
    @pytest.mark.asyncio
    async def test_reports_movement(self, fake_page_factory):
        page = fake_page_factory(max_scroll=1500, scroll_step=1000)

        assert await scroll_page(page) is True
        assert await scroll_page(page) is True
        assert await scroll_page(page) is False

    @pytest.mark.asyncio
    async def test_scroll_by_percentage_in_container(self):
        page = AsyncMock()
        page.evaluate = AsyncMock(side_effect=[0, None, 300])

        moved = await scroll_page(page, to_bottom=False, distance="50%", container="#feed")

        assert moved is True
        page.evaluate.assert_any_await(SCROLL_BY_SCRIPT, ["#feed", 50.0, True])

    @pytest.mark.asyncio
    async def test_scroll_to_bottom_window(self):
        page = AsyncMock()
        page.evaluate = AsyncMock(side_effect=[100, None, 100])

        assert await scroll_page(page) is False
        page.evaluate.assert_any_await(SCROLL_TO_BOTTOM_SCRIPT, None)


class TestFindFirstVisible:
    @pytest.mark.asyncio
    async def test_returns_first_visible_in_order(self, fake_page_factory):
        page = fake_page_factory(visible={".b", ".c"})

        locator, selector = await find_first_visible(page, ["", ".a", ".b", ".c"])

        assert selector == ".b"
        assert locator is not None

    @pytest.mark.asyncio
    async def test_skips_selectors_that_raise(self):
        broken = MagicMock()
        broken.count = AsyncMock(side_effect=RuntimeError("invalid selector"))
        ok = MagicMock()
        ok.count = AsyncMock(return_value=2)
        ok.first.is_visible = AsyncMock(return_value=True)
        page = MagicMock()
        page.locator = MagicMock(side_effect=[broken, ok])

        locator, selector = await find_first_visible(page, ["a[[", ".more"])

        assert selector == ".more"
        assert locator is ok.first

    @pytest.mark.asyncio
    async def test_nothing_visible(self, fake_page_factory):
        assert await find_first_visible(fake_page_factory(), [".a"]) == (None, None)


class TestTolerantWaits:
    @pytest.mark.asyncio
    async def test_timeout_is_not_an_error(self, fake_page_factory):
        page = fake_page_factory()
        assert await wait_for_selector_quietly(page, ".late", timeout=10) is False

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        page = AsyncMock()
        page.wait_for_selector = AsyncMock(side_effect=RuntimeError("page crashed"))

        with pytest.raises(RuntimeError):
            await wait_for_selector_quietly(page, ".x", timeout=10)

    @pytest.mark.asyncio
    async def test_loading_cycle_without_indicator(self, fake_page_factory):
        assert await wait_for_loading_cycle(fake_page_factory(), ".spinner", 10) is False
