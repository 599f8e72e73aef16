"""页码分页执行器"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.browser.actions import find_first_visible, wait_for_settled
from ...common.constants import PAGE_NUMBER_PLACEHOLDER
from ..models import NumberedPaginationConfig, StopReason
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext


class NumberedPaginationExecutor(PaginationExecutor[NumberedPaginationConfig]):
    """
    每轮收割当前页后翻页：

    - 默认点击 "下一页" 控件，控件不可见 → endReached
    - use_direct_page_links 时按页码直接跳转：有 page_url_pattern 则导航到对应 URL，
      否则点击文本等于页码的 page_number_selector 链接；
      跳转后的页面没有新条目 → endReached
    """

    async def execute(self, ctx: "PaginationContext") -> None:
        while True:
            if await self.should_stop(ctx):
                return
            await self.begin_cycle(ctx)

            if self.config.current_page_selector:
                await self._log_current_page(ctx)

            accepted = await self.harvest_and_merge(ctx)
            ctx.advance()

            if await self.should_stop(ctx):
                return

            if self.config.use_direct_page_links and not accepted:
                ctx.log("[Numbered] 页面没有新条目，视为已到末页")
                ctx.stop(StopReason.END_REACHED)
                return

            if self.config.use_direct_page_links:
                moved = await self._goto_page_number(ctx, ctx.state.current_page + 1)
            else:
                moved = await self._click_next(ctx)

            if not moved:
                ctx.stop(StopReason.END_REACHED)
                return

            await wait_for_settled(ctx.page, self.defaults.network_idle_timeout_ms)

    async def _click_next(self, ctx: "PaginationContext") -> bool:
        button, _ = await find_first_visible(ctx.page, [self.config.next_button_selector])
        if button is None:
            ctx.log("[Numbered] 下一页控件不可见")
            return False
        await button.click()
        return True

    async def _goto_page_number(self, ctx: "PaginationContext", page_number: int) -> bool:
        if self.config.page_url_pattern:
            url = self.config.page_url_pattern.replace(PAGE_NUMBER_PLACEHOLDER, str(page_number))
            ctx.log(f"[Numbered] 跳转到第 {page_number} 页: {url}")
            await ctx.page.goto(url)
            return True

        selector = f"{self.config.page_number_selector} >> text=/^\\s*{page_number}\\s*$/"
        link, _ = await find_first_visible(ctx.page, [selector])
        if link is None:
            ctx.log(f"[Numbered] 未找到第 {page_number} 页的链接")
            return False
        await link.click()
        return True

    async def _log_current_page(self, ctx: "PaginationContext") -> None:
        indicator, _ = await find_first_visible(ctx.page, [self.config.current_page_selector])
        if indicator is not None:
            label = (await indicator.text_content() or "").strip()
            ctx.log(f"[Numbered] 当前页指示器: {label}")
