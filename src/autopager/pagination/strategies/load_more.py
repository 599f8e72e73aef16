"""加载更多按钮执行器"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.browser.actions import find_first_visible, wait_for_selector_quietly
from ...common.utils import sleep_ms
from ..models import LoadMoreButtonConfig, StopReason
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext


class LoadMoreButtonExecutor(PaginationExecutor[LoadMoreButtonConfig]):
    """进入循环前先收割初始快照；每轮点击第一个可见的按钮后再收割"""

    async def execute(self, ctx: "PaginationContext") -> None:
        selectors = [self.config.button_selector, *self.config.alternative_selectors]
        wait_after_click = (
            self.config.wait_after_click
            if self.config.wait_after_click is not None
            else self.defaults.wait_after_click_ms
        )

        await self.harvest_and_merge(ctx, notify=False)

        while True:
            if await self.should_stop(ctx):
                return

            button, used_selector = await find_first_visible(ctx.page, selectors)
            if button is None:
                ctx.log("[LoadMore] 未找到可见的加载更多按钮")
                ctx.stop(StopReason.END_REACHED)
                return

            await self.begin_cycle(ctx)
            ctx.log(f"[LoadMore] 点击: {used_selector}")
            await button.click()
            await sleep_ms(wait_after_click)

            if self.config.wait_for_selector:
                await wait_for_selector_quietly(
                    ctx.page,
                    self.config.wait_for_selector,
                    self.defaults.wait_for_selector_timeout_ms,
                )

            await self.harvest_and_merge(ctx)
            ctx.advance()
