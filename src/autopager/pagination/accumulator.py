"""条目累积与去重"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..common.utils import maybe_await
from .models import T

if TYPE_CHECKING:
    from .context import PaginationContext


async def accumulate(
    ctx: "PaginationContext[T]",
    batch: list[T],
    max_items: int | None = None,
) -> list[T]:
    """把一轮提取到的条目合并进累积列表

    - 有去重谓词时，针对完整的已累积列表（含本轮已接受的条目）判断，谓词可为协程；
      判定为重复的条目仅在 include_duplicates=True 时仍被追加。
    - 达到 max_items 后不再接受新条目，累积列表不会超过上限。
    - 无论去重结果如何，on_items_extracted 每轮恰好触发一次，传入去重前的整批条目。

    Returns:
        本轮被接受的条目
    """
    accepted: list[T] = []

    for item in batch:
        if max_items is not None and len(ctx.items) >= max_items:
            break

        if ctx.is_duplicate is not None and not ctx.include_duplicates:
            if await maybe_await(ctx.is_duplicate(item, ctx.items)):
                continue

        ctx.items.append(item)
        accepted.append(item)

    ctx.state.total_items += len(accepted)

    await ctx.emit("on_items_extracted", batch, ctx.state.current_page, ctx.state)
    return accepted
