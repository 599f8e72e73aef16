"""pytest 全局配置和 fixtures

提供一个脚本化的内存页面（FakePage）代替真实浏览器，
以及控制器与执行器测试共用的默认参数。
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Callable

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

# 添加项目路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from autopager.common.browser.actions import (  # noqa: E402
    SCROLL_BY_SCRIPT,
    SCROLL_POSITION_SCRIPT,
    SCROLL_TO_BOTTOM_SCRIPT,
)
from autopager.common.config import PaginationDefaults  # noqa: E402


# ============================================================================
# 脚本化页面
# ============================================================================


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    async def count(self) -> int:
        return 1 if self.page.is_visible(self.selector) else 0

    async def is_visible(self) -> bool:
        return self.page.is_visible(self.selector)

    async def click(self) -> None:
        self.page.clicks.append(self.selector)
        handler = self.page.on_click.get(self.selector)
        if handler is not None:
            handler(self.page)

    async def text_content(self) -> str | None:
        return self.page.texts.get(self.selector)


class FakePage:
    """按快照序列回放的页面

    - content() 返回 snapshots[index]（超出范围时停在最后一个）
    - 滚动到底部会把滚动位置推进 scroll_step，直到 max_scroll；
      每次真正发生位移时 index + 1
    - visible 为可见选择器集合，或接收 (page, selector) 的谓词
    """

    def __init__(
        self,
        snapshots: list[str] | None = None,
        visible: set[str] | Callable[["FakePage", str], bool] | None = None,
        on_click: dict[str, Callable[["FakePage"], None]] | None = None,
        texts: dict[str, str] | None = None,
        max_scroll: float = 0,
        scroll_step: float = 1000,
    ):
        self.snapshots = snapshots or [""]
        self.index = 0
        self.visible = visible if visible is not None else set()
        self.on_click = on_click or {}
        self.texts = texts or {}
        self.scroll_position = 0.0
        self.max_scroll = max_scroll
        self.scroll_step = scroll_step
        self.clicks: list[str] = []
        self.visited: list[str] = []
        self.scroll_calls = 0
        self.closed = False
        self.opened_url: str | None = None

    def is_visible(self, selector: str) -> bool:
        if callable(self.visible):
            return bool(self.visible(self, selector))
        return selector in self.visible

    def advance(self) -> None:
        self.index += 1

    async def content(self) -> str:
        return self.snapshots[min(self.index, len(self.snapshots) - 1)]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if script == SCROLL_POSITION_SCRIPT:
            return self.scroll_position
        if script in (SCROLL_TO_BOTTOM_SCRIPT, SCROLL_BY_SCRIPT):
            self.scroll_calls += 1
            target = min(self.scroll_position + self.scroll_step, self.max_scroll)
            if target != self.scroll_position:
                self.scroll_position = target
                self.advance()
            return None
        raise AssertionError(f"unexpected script: {script!r}")

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        self.advance()

    async def wait_for_selector(self, selector: str, timeout: int | None = None, state: str = "visible"):
        present = self.is_visible(selector)
        if (state == "visible" and present) or (state == "hidden" and not present):
            return None
        raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector}")

    async def wait_for_load_state(self, state: str = "load", timeout: int | None = None) -> None:
        return None

    async def wait_for_timeout(self, timeout: int) -> None:
        return None

    async def close(self) -> None:
        self.closed = True


def items_from_snapshot(_page, html: str) -> list[dict]:
    """快照格式：逗号分隔的条目 id"""
    return [{"id": token} for token in html.split(",") if token]


def same_id(item: dict, existing: list[dict]) -> bool:
    return any(other["id"] == item["id"] for other in existing)


def make_opener(page: FakePage):
    """构造控制器使用的 open_document 工厂，退出时关闭页面"""

    @asynccontextmanager
    async def opener(url: str):
        page.opened_url = url
        try:
            yield page
        finally:
            await page.close()

    return opener


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fast_defaults() -> PaginationDefaults:
    """所有等待为 0 的分页默认参数"""
    return PaginationDefaults(
        delay_ms=0,
        scroll_delay_ms=0,
        wait_after_click_ms=0,
        loading_timeout_ms=10,
        wait_for_selector_timeout_ms=10,
        network_idle_timeout_ms=10,
        verbose=False,
    )


@pytest.fixture
def fake_page_factory():
    return FakePage


@pytest.fixture
def extract_ids():
    return items_from_snapshot


@pytest.fixture
def dedup_by_id():
    return same_id


@pytest.fixture
def opener_for():
    return make_opener
