"""分页控制器

负责单次分页运行的生命周期：打开文档、初始化状态、分发到策略执行器、
收尾并组装结果，文档在任何退出路径上都会被关闭。
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Any, Callable

from ..common.config import PaginationDefaults, config as global_config
from ..common.exceptions import PageLoadError
from ..common.logger import get_pagination_logger
from ..common.utils import maybe_await
from .context import PaginationContext
from .models import (
    PaginationEventHandlers,
    PaginationMetadata,
    PaginationResult,
    PaginationState,
    StopReason,
    now_ms,
)
from .strategies import create_executor

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

    from playwright.async_api import Page

logger = get_pagination_logger()


class PaginationController:
    """分页控制器

    Args:
        open_document: url -> 异步上下文管理器（产出可交互页面）
        defaults: 分页默认参数，None 使用全局配置

    Example:
        >>> controller = PaginationController(lambda url: open_document(engine, url))
        >>> result = await controller.run(url, LoadMoreButtonConfig(button_selector=".more"), extract)
    """

    def __init__(
        self,
        open_document: Callable[[str], "AbstractAsyncContextManager[Page]"],
        defaults: PaginationDefaults | None = None,
    ):
        self.open_document = open_document
        self.defaults = defaults or global_config.pagination

    async def run(
        self,
        url: str,
        config,
        extract_items: Callable[..., Any],
        is_duplicate: Callable[..., bool] | None = None,
        include_duplicates: bool = False,
        event_handlers: PaginationEventHandlers | None = None,
    ) -> PaginationResult:
        """执行一次分页运行

        Raises:
            PageLoadError: 文档无法打开；异常的 result 为错误状态的结果
        """
        handlers = event_handlers or PaginationEventHandlers()
        verbose = bool(config.verbose or self.defaults.verbose)
        state = PaginationState()

        async with AsyncExitStack() as stack:
            try:
                page = await stack.enter_async_context(self.open_document(url))
            except Exception as e:
                message = str(e)
                logger.error(f"[Pagination] 打开页面失败: {url} - {message}")
                state.errors.append(message)
                result = self._build_result(state, [], 0, False, StopReason.ERROR)
                if handlers.on_error is not None:
                    await maybe_await(handlers.on_error(message, state.current_page, state))
                if isinstance(e, PageLoadError):
                    e.result = result
                    raise
                raise PageLoadError(url, message, result=result) from e

            ctx: PaginationContext = PaginationContext(
                page=page,
                extract_items=extract_items,
                is_duplicate=is_duplicate,
                include_duplicates=include_duplicates,
                handlers=handlers,
                state=state,
                verbose=verbose,
            )
            ctx.log(f"[Pagination] 开始分页: {url} (策略: {config.type})")

            try:
                await ctx.emit("on_page_start", 0, state)
                await create_executor(config, self.defaults).execute(ctx)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error(f"[Pagination] 分页出错 (第 {state.current_page} 轮): {message}")
                state.errors.append(message)
                await ctx.emit("on_error", message, state.current_page, state)
                return self._build_result(
                    state, ctx.items, ctx.pages_processed, False, StopReason.ERROR
                )

            result = self._build_result(
                state,
                ctx.items,
                ctx.pages_processed,
                True,
                ctx.stop_reason or StopReason.END_REACHED,
            )
            ctx.log(
                f"[Pagination] 完成: {result.pages_processed} 轮, {len(result.items)} 条, "
                f"停止原因 {result.stop_reason.value}"
            )
            await ctx.emit("on_complete", result)
            return result

    @staticmethod
    def _build_result(
        state: PaginationState,
        items: list,
        pages_processed: int,
        completed: bool,
        stop_reason: StopReason,
    ) -> PaginationResult:
        end_time = now_ms()
        total_time = end_time - state.start_time
        metadata = PaginationMetadata(
            start_time=state.start_time,
            end_time=end_time,
            average_page_time=total_time / max(pages_processed, 1),
            last_cursor=state.last_cursor,
            last_timestamp=state.last_timestamp,
        )
        return PaginationResult(
            items=list(items),
            pages_processed=pages_processed,
            total_time=total_time,
            completed=completed,
            stop_reason=stop_reason,
            errors=list(state.errors),
            metadata=metadata,
        )
