"""页面交互工具函数

分页执行器只通过这里的函数触碰页面：读取/改变滚动位置、查找可见控件、
以及可容忍超时的等待。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from playwright.async_api import TimeoutError as PlaywrightTimeout

from ..constants import DEFAULT_SCROLL_PIXELS
from ..validators import parse_scroll_distance

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page


SCROLL_POSITION_SCRIPT = """
(container) => {
    if (container) {
        const el = document.querySelector(container);
        return el ? el.scrollTop : 0;
    }
    return window.pageYOffset || document.documentElement.scrollTop || 0;
}
"""

SCROLL_TO_BOTTOM_SCRIPT = """
(container) => {
    const el = container ? document.querySelector(container) : null;
    if (el) {
        el.scrollTop = el.scrollHeight;
    } else {
        window.scrollTo(0, document.documentElement.scrollHeight);
    }
}
"""

SCROLL_BY_SCRIPT = """
([container, distance, isPercent]) => {
    const el = container ? document.querySelector(container) : null;
    const viewport = el ? el.clientHeight : window.innerHeight;
    const delta = isPercent ? viewport * distance / 100 : distance;
    if (el) {
        el.scrollTop = el.scrollTop + delta;
    } else {
        window.scrollBy(0, delta);
    }
}
"""


async def get_scroll_position(page: "Page", container: str | None = None) -> float:
    """读取当前滚动偏移（像素）"""
    position = await page.evaluate(SCROLL_POSITION_SCRIPT, container)
    return float(position or 0)


async def scroll_page(
    page: "Page",
    to_bottom: bool = True,
    distance: int | float | str | None = None,
    container: str | None = None,
) -> bool:
    """滚动页面并通过比较前后偏移判断是否真的移动了

    Args:
        page: Playwright 页面对象
        to_bottom: 是否直接滚动到底部
        distance: 固定滚动距离，像素值或视口百分比（如 "80%"）；仅在 to_bottom=False 时使用
        container: 滚动容器选择器，None 表示窗口

    Returns:
        是否发生了位移（False 表示页面已无法继续滚动）
    """
    before = await get_scroll_position(page, container)

    if to_bottom:
        await page.evaluate(SCROLL_TO_BOTTOM_SCRIPT, container)
    else:
        value, is_percent = parse_scroll_distance(
            distance if distance is not None else DEFAULT_SCROLL_PIXELS
        )
        await page.evaluate(SCROLL_BY_SCRIPT, [container, value, is_percent])

    after = await get_scroll_position(page, container)
    return after != before


async def find_first_visible(
    page: "Page",
    selectors: Iterable[str],
) -> tuple["Locator | None", str | None]:
    """
    按顺序尝试多个选择器，返回第一个匹配且可见的元素。

    Returns:
        tuple[Locator | None, str | None]: 匹配到的 Locator 和对应的选择器。
    """
    for selector in selectors:
        if not selector:
            continue
        try:
            locator = page.locator(selector)
            if await locator.count() == 0:
                continue
            first = locator.first
            if await first.is_visible():
                return first, selector
        except Exception:
            # 非法选择器或元素在检查期间被移除
            continue
    return None, None


async def is_selector_visible(page: "Page", selector: str) -> bool:
    locator, _ = await find_first_visible(page, [selector])
    return locator is not None


async def wait_for_selector_quietly(
    page: "Page",
    selector: str,
    timeout: int,
    state: str = "visible",
) -> bool:
    """等待选择器达到指定状态，超时不算错误

    Returns:
        是否在超时内达到状态
    """
    try:
        await page.wait_for_selector(selector, timeout=timeout, state=state)
        return True
    except PlaywrightTimeout:
        return False


async def wait_for_loading_cycle(page: "Page", loading_selector: str, timeout: int) -> bool:
    """等待加载指示器出现再消失

    指示器一直没有出现时直接返回 False，视为无需等待。
    """
    appeared = await wait_for_selector_quietly(page, loading_selector, timeout, state="visible")
    if not appeared:
        return False
    return await wait_for_selector_quietly(page, loading_selector, timeout, state="hidden")


async def wait_for_settled(page: "Page", timeout: int, state: str = "networkidle") -> bool:
    """等待页面进入稳定的加载状态（超时不算错误）"""
    try:
        await page.wait_for_load_state(state, timeout=timeout)
        return True
    except PlaywrightTimeout:
        return False
