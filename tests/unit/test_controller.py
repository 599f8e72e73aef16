"""分页控制器测试"""

from contextlib import asynccontextmanager

import pytest

from autopager.common.exceptions import PageLoadError
from autopager.pagination import (
    InfiniteScrollConfig,
    LoadMoreButtonConfig,
    PaginationEventHandlers,
    StopReason,
)
from autopager.pagination.controller import PaginationController


@asynccontextmanager
async def _failing_opener(url):
    raise ConnectionError("net::ERR_NAME_NOT_RESOLVED")
    yield  # pragma: no cover


class TestDocumentOpenFailure:
    @pytest.mark.asyncio
    async def test_error_state_is_attached_to_exception(self, extract_ids, fast_defaults):
        errors = []
        handlers = PaginationEventHandlers(
            on_error=lambda message, n, state: errors.append((message, n))
        )
        controller = PaginationController(_failing_opener, defaults=fast_defaults)

        with pytest.raises(PageLoadError) as exc_info:
            await controller.run(
                "https://nowhere.invalid",
                InfiniteScrollConfig(),
                extract_ids,
                event_handlers=handlers,
            )

        result = exc_info.value.result
        assert result.completed is False
        assert result.stop_reason == StopReason.ERROR
        assert len(result.errors) == 1
        assert result.items == []
        assert result.pages_processed == 0
        assert errors == [("net::ERR_NAME_NOT_RESOLVED", 0)]
        assert exc_info.value.url == "https://nowhere.invalid"

    @pytest.mark.asyncio
    async def test_page_load_error_is_not_wrapped_twice(self, extract_ids, fast_defaults):
        @asynccontextmanager
        async def no_response_opener(url):
            raise PageLoadError(url, "导航未返回响应")
            yield  # pragma: no cover

        controller = PaginationController(no_response_opener, defaults=fast_defaults)

        with pytest.raises(PageLoadError) as exc_info:
            await controller.run("https://example.com", InfiniteScrollConfig(), extract_ids)

        assert str(exc_info.value) == "导航未返回响应: https://example.com"
        assert exc_info.value.__cause__ is None
        result = exc_info.value.result
        assert result.stop_reason == StopReason.ERROR
        assert result.errors == ["导航未返回响应: https://example.com"]


class TestRunLifecycle:
    @pytest.mark.asyncio
    async def test_extractor_failure_keeps_partial_items(
        self, fake_page_factory, opener_for, fast_defaults
    ):
        page = fake_page_factory(
            snapshots=["a", "b"], visible={".more"}, on_click={".more": lambda p: p.advance()}
        )
        seen = []

        def extract(p, html):
            if html == "b":
                raise ValueError("selector drifted")
            return [{"id": html}]

        errors = []
        handlers = PaginationEventHandlers(
            on_error=lambda message, n, state: errors.append(message),
            on_complete=lambda result: seen.append(result),
        )
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com",
            LoadMoreButtonConfig(button_selector=".more"),
            extract,
            event_handlers=handlers,
        )

        assert result.completed is False
        assert result.stop_reason == StopReason.ERROR
        assert result.items == [{"id": "a"}]
        assert result.errors == ["selector drifted"]
        assert errors == ["selector drifted"]
        assert seen == []
        assert page.closed is True

    @pytest.mark.asyncio
    async def test_reveal_action_failure_keeps_partial_items(
        self, fake_page_factory, opener_for, extract_ids, fast_defaults
    ):
        def detached(p):
            raise RuntimeError("Element is not attached to the DOM")

        page = fake_page_factory(snapshots=["a,b"], visible={".more"}, on_click={".more": detached})
        errors = []
        handlers = PaginationEventHandlers(on_error=lambda message, n, state: errors.append(n))
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com",
            LoadMoreButtonConfig(button_selector=".more"),
            extract_ids,
            event_handlers=handlers,
        )

        assert result.completed is False
        assert result.stop_reason == StopReason.ERROR
        assert [item["id"] for item in result.items] == ["a", "b"]
        assert result.errors == ["Element is not attached to the DOM"]
        assert errors == [0]
        assert page.closed is True

    @pytest.mark.asyncio
    async def test_successful_run_metadata_and_events(
        self, fake_page_factory, opener_for, extract_ids, fast_defaults
    ):
        page = fake_page_factory(snapshots=["a,b"])
        completed = []
        handlers = PaginationEventHandlers(on_complete=completed.append)
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com/feed",
            LoadMoreButtonConfig(button_selector=".more"),
            extract_ids,
            event_handlers=handlers,
        )

        assert page.opened_url == "https://example.com/feed"
        assert page.closed is True
        assert completed == [result]
        assert result.completed is True
        assert result.metadata.start_time <= result.metadata.end_time
        assert result.total_time == pytest.approx(
            result.metadata.end_time - result.metadata.start_time
        )
        # 没有处理任何轮次时按 1 计算平均值
        assert result.metadata.average_page_time == pytest.approx(result.total_time)

    @pytest.mark.asyncio
    async def test_average_page_time(self, fake_page_factory, opener_for, extract_ids, fast_defaults):
        page = fake_page_factory(snapshots=["a"], max_scroll=0)
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run("https://example.com", InfiniteScrollConfig(), extract_ids)

        assert result.pages_processed == 2
        assert result.metadata.average_page_time == pytest.approx(result.total_time / 2)

    @pytest.mark.asyncio
    async def test_async_handlers_and_extractor(
        self, fake_page_factory, opener_for, fast_defaults
    ):
        page = fake_page_factory(snapshots=["a"])
        started = []

        async def extract(p, html):
            return [{"id": html}]

        async def on_page_start(n, state):
            started.append(n)

        controller = PaginationController(opener_for(page), defaults=fast_defaults)
        result = await controller.run(
            "https://example.com",
            LoadMoreButtonConfig(button_selector=".more"),
            extract,
            event_handlers=PaginationEventHandlers(on_page_start=on_page_start),
        )

        assert started == [0]
        assert result.items == [{"id": "a"}]

    @pytest.mark.asyncio
    async def test_include_duplicates(self, fake_page_factory, opener_for, extract_ids, dedup_by_id, fast_defaults):
        page = fake_page_factory(snapshots=["a,a,b"])
        controller = PaginationController(opener_for(page), defaults=fast_defaults)

        result = await controller.run(
            "https://example.com",
            LoadMoreButtonConfig(button_selector=".more"),
            extract_ids,
            is_duplicate=dedup_by_id,
            include_duplicates=True,
        )

        assert [item["id"] for item in result.items] == ["a", "a", "b"]
