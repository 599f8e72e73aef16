"""分页执行器基类

每种策略一个执行器，负责完整的 "揭示 → 收割" 循环。
基类提供各策略共用的轮次骨架：停止检查、轮次开始事件与间隔、收割合并。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from ...common.config import PaginationDefaults, config as global_config
from ...common.utils import sleep_ms
from ..accumulator import accumulate
from ..models import BasePaginationConfig
from ..stop_policy import evaluate_stop

if TYPE_CHECKING:
    from ..context import PaginationContext

ConfigT = TypeVar("ConfigT", bound=BasePaginationConfig)


class PaginationExecutor(ABC, Generic[ConfigT]):
    """分页执行器基类"""

    def __init__(self, config: ConfigT, defaults: PaginationDefaults | None = None):
        self.config = config
        self.defaults = defaults or global_config.pagination

    @abstractmethod
    async def execute(self, ctx: "PaginationContext") -> None:
        """运行完整的分页循环，返回前必须设置 ctx.stop_reason"""

    @property
    def delay_ms(self) -> int:
        return self.config.delay if self.config.delay is not None else self.defaults.delay_ms

    async def should_stop(self, ctx: "PaginationContext") -> bool:
        """执行停止策略，命中时记录停止原因"""
        reason = await evaluate_stop(self.config, ctx)
        if reason is None:
            return False
        ctx.stop(reason)
        return True

    async def begin_cycle(self, ctx: "PaginationContext") -> None:
        """非首轮：先等待轮次间隔，再触发 on_page_start"""
        if ctx.state.current_page == 0:
            return
        await sleep_ms(self.delay_ms)
        await ctx.emit("on_page_start", ctx.state.current_page, ctx.state)

    async def harvest_and_merge(self, ctx: "PaginationContext", notify: bool = True) -> list:
        """收割当前文档并合并，返回本轮被接受的条目"""
        ctx.state.is_loading = True
        try:
            batch = await ctx.harvest()
        finally:
            ctx.state.is_loading = False
        ctx.last_batch = batch

        accepted = await accumulate(ctx, batch, self.config.max_items)
        ctx.log(
            f"[Pagination] 第 {ctx.state.current_page} 轮: 提取 {len(batch)} 条, "
            f"新增 {len(accepted)} 条, 累计 {len(ctx.items)} 条"
        )

        if notify:
            await ctx.emit("on_page_complete", ctx.state.current_page, accepted, ctx.state)
        return accepted
