"""混合策略执行器"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.logger import get_pagination_logger
from ..models import BasePaginationConfig, HybridConfig
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext

logger = get_pagination_logger()

_INHERITED_LIMITS = ("delay", "stop_condition")
_CAPPED_LIMITS = ("max_pages", "max_items")


def inherit_limits(strategy: BasePaginationConfig, parent: BasePaginationConfig):
    """子策略未设置的通用限制沿用混合策略上的值

    max_pages / max_items 两边都设置时取较小值，子策略不能突破混合策略的上限。
    """
    update = {
        name: getattr(parent, name)
        for name in _INHERITED_LIMITS
        if getattr(strategy, name) is None and getattr(parent, name) is not None
    }
    for name in _CAPPED_LIMITS:
        own, cap = getattr(strategy, name), getattr(parent, name)
        if cap is not None and (own is None or own > cap):
            update[name] = cap
    if parent.verbose and not strategy.verbose:
        update["verbose"] = True
    return strategy.model_copy(update=update) if update else strategy


class HybridExecutor(PaginationExecutor[HybridConfig]):
    """
    先运行主策略；主策略抛出任何异常时记录警告，
    用备用策略继续同一次运行（共享状态与已累积的条目，不从头开始）。

    switch_condition 不参与决策。
    """

    async def execute(self, ctx: "PaginationContext") -> None:
        from .registry import create_executor

        primary = inherit_limits(self.config.primary_strategy, self.config)
        fallback = inherit_limits(self.config.fallback_strategy, self.config)

        try:
            await create_executor(primary, self.defaults).execute(ctx)
        except Exception as e:
            logger.warning(
                f"[Hybrid] 主策略 {primary.type} 失败，切换到备用策略 {fallback.type}: {e}"
            )
            ctx.stop_reason = None
            await create_executor(fallback, self.defaults).execute(ctx)
