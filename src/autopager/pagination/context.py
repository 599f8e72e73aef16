"""单次分页运行的工作上下文

控制器创建，执行器就地修改：累积条目、推进计数、记录游标与停止原因。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Generic

from ..common.logger import get_pagination_logger, verbose_level
from ..common.utils import maybe_await
from .models import PaginationEventHandlers, PaginationState, StopReason, T

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = get_pagination_logger()


@dataclass
class PaginationContext(Generic[T]):
    page: "Page"
    extract_items: Callable[..., Any]
    is_duplicate: Callable[..., bool] | None = None
    include_duplicates: bool = False
    handlers: PaginationEventHandlers = field(default_factory=PaginationEventHandlers)
    state: PaginationState = field(default_factory=PaginationState)
    items: list[T] = field(default_factory=list)
    pages_processed: int = 0
    stop_reason: StopReason | None = None
    last_batch: list[T] | None = None
    verbose: bool = False

    async def harvest(self) -> list[T]:
        """对当前文档状态调用条目提取器"""
        html = await self.page.content()
        extracted = await maybe_await(self.extract_items(self.page, html))
        return list(extracted or [])

    @property
    def appends_every_item(self) -> bool:
        """没有生效的去重谓词时，每轮收割的整批条目都会被追加"""
        return self.is_duplicate is None or self.include_duplicates

    def advance(self) -> None:
        """一轮结束：推进页码与已处理页数"""
        self.state.current_page += 1
        self.pages_processed += 1

    def stop(self, reason: StopReason) -> None:
        self.stop_reason = reason
        self.log(f"[Pagination] 停止: {reason.value} (第 {self.state.current_page} 轮)")

    def record_cursor(self, cursor: Any) -> None:
        self.state.last_cursor = cursor

    async def emit(self, event: str, *args: Any) -> None:
        """触发生命周期回调（未注册则忽略）"""
        handler = getattr(self.handlers, event, None)
        if handler is None:
            return
        await maybe_await(handler(*args))

    def log(self, message: str) -> None:
        logger.log(verbose_level(self.verbose), message)
