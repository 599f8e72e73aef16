"""停止条件策略（所有执行器共享）

每轮开始前按优先级检查：
1. max_pages：current_page >= max_pages
2. max_items：已累积条目数 >= max_items
3. 调用方 stop_condition（针对实时文档求值）
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common.utils import maybe_await
from .models import BasePaginationConfig, StopReason

if TYPE_CHECKING:
    from .context import PaginationContext


async def evaluate_stop(
    config: BasePaginationConfig,
    ctx: "PaginationContext",
) -> StopReason | None:
    """返回应当停止的原因，None 表示继续

    不修改运行状态；状态不变时重复调用得到相同结论。
    """
    if config.max_pages is not None and ctx.state.current_page >= config.max_pages:
        return StopReason.MAX_PAGES

    if config.max_items is not None and len(ctx.items) >= config.max_items:
        return StopReason.MAX_ITEMS

    if config.stop_condition is not None:
        satisfied = await maybe_await(
            config.stop_condition(ctx.page, list(ctx.items), ctx.state.current_page)
        )
        if satisfied:
            return StopReason.CUSTOM_CONDITION

    return None
