"""游标分页执行器"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.utils import maybe_await
from ..models import CursorBasedConfig, StopReason
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext


def _is_end(cursor) -> bool:
    return cursor is None or cursor == ""


class CursorBasedExecutor(PaginationExecutor[CursorBasedConfig]):
    """
    每轮收割后向调用方索取下一个游标；游标为 None 或空串 → endReached，
    否则记录游标并交给调用方的导航函数。游标对引擎是不透明的。
    """

    async def execute(self, ctx: "PaginationContext") -> None:
        if not _is_end(self.config.initial_cursor) and ctx.state.last_cursor is None:
            ctx.log(f"[Cursor] 使用初始游标: {self.config.initial_cursor}")
            ctx.record_cursor(self.config.initial_cursor)
            await maybe_await(self.config.navigate_with_cursor(ctx.page, self.config.initial_cursor))

        while True:
            if await self.should_stop(ctx):
                return
            await self.begin_cycle(ctx)

            await self.harvest_and_merge(ctx)
            ctx.advance()

            cursor = await maybe_await(self.config.extract_cursor(ctx.page, list(ctx.items)))
            if _is_end(cursor):
                ctx.log("[Cursor] 没有下一个游标")
                ctx.stop(StopReason.END_REACHED)
                return

            ctx.record_cursor(cursor)

            if await self.should_stop(ctx):
                return

            ctx.log(f"[Cursor] 使用游标翻页: {cursor}")
            await maybe_await(self.config.navigate_with_cursor(ctx.page, cursor))
