"""无限滚动执行器"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.browser.actions import is_selector_visible, scroll_page, wait_for_loading_cycle
from ...common.utils import sleep_ms
from ..models import InfiniteScrollConfig, StopReason
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext


class InfiniteScrollExecutor(PaginationExecutor[InfiniteScrollConfig]):
    """
    每轮先收割；本轮没有新条目时才滚动。

    - 滚动前后偏移不变，或连续无新条目的滚动次数达到 max_scrolls → endReached
    - 出现内容结束标记 → endReached
    - 有新条目时重置滚动失败计数，直接进入下一轮
    - 没有去重谓词时，以本轮整批条目与上一轮是否不同判断有无新内容
    """

    async def execute(self, ctx: "PaginationContext") -> None:
        options = self.config.scroll_options
        scroll_delay = (
            options.scroll_delay if options.scroll_delay is not None else self.defaults.scroll_delay_ms
        )
        stale_scrolls = 0

        while True:
            if await self.should_stop(ctx):
                return
            await self.begin_cycle(ctx)

            previous_batch = ctx.last_batch
            accepted = await self.harvest_and_merge(ctx)
            ctx.advance()

            if self._found_new_content(ctx, accepted, previous_batch):
                stale_scrolls = 0
                continue

            if await self.should_stop(ctx):
                return

            if self.config.end_of_content_selector and await is_selector_visible(
                ctx.page, self.config.end_of_content_selector
            ):
                ctx.log("[InfiniteScroll] 检测到内容结束标记")
                ctx.stop(StopReason.END_REACHED)
                return

            if options.max_scrolls is not None and stale_scrolls >= options.max_scrolls:
                ctx.log(f"[InfiniteScroll] 已连续滚动 {stale_scrolls} 次无新内容")
                ctx.stop(StopReason.END_REACHED)
                return

            moved = await scroll_page(
                ctx.page,
                to_bottom=options.scroll_to_bottom,
                distance=options.scroll_distance,
                container=options.scroll_container,
            )
            stale_scrolls += 1

            if not moved:
                ctx.log("[InfiniteScroll] 滚动位置未变化，已到达底部")
                ctx.stop(StopReason.END_REACHED)
                return

            if self.config.loading_selector:
                await wait_for_loading_cycle(
                    ctx.page, self.config.loading_selector, self.defaults.loading_timeout_ms
                )
            else:
                await sleep_ms(scroll_delay)

    @staticmethod
    def _found_new_content(ctx: "PaginationContext", accepted: list, previous_batch: list | None) -> bool:
        if ctx.appends_every_item:
            return ctx.last_batch != previous_batch
        return bool(accepted)
