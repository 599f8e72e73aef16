"""分页数据模型定义

配置使用 pydantic（按 type 字段区分的联合类型），
运行状态与结果使用 dataclass。
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Callable, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..common.exceptions import ConfigValidationError
from ..common.validators import parse_scroll_distance, validate_page_url_pattern

T = TypeVar("T")


def now_ms() -> float:
    """当前时间戳（毫秒）"""
    return time.time() * 1000


# ============================================================================
# 枚举
# ============================================================================


class PaginationType(str, Enum):
    """分页策略类型"""

    INFINITE_SCROLL = "infinite-scroll"
    LOAD_MORE_BUTTON = "load-more-button"
    NUMBERED_PAGINATION = "numbered-pagination"
    CURSOR_BASED = "cursor-based"
    TIME_BASED = "time-based"
    HYBRID = "hybrid"


class StopReason(str, Enum):
    """停止原因"""

    MAX_PAGES = "maxPages"
    MAX_ITEMS = "maxItems"
    END_REACHED = "endReached"
    ERROR = "error"
    CUSTOM_CONDITION = "customCondition"


# ============================================================================
# 分页配置
# ============================================================================


class BasePaginationConfig(BaseModel):
    """所有分页策略共享的参数"""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    max_pages: int | None = Field(default=None, ge=0, description="最大翻页（轮次）数")
    max_items: int | None = Field(default=None, ge=0, description="最大采集条目数")
    delay: int | None = Field(default=None, ge=0, description="轮次间隔（毫秒），None 使用全局默认")
    verbose: bool = Field(default=False, description="输出逐轮诊断日志")
    stop_condition: Callable[..., Any] | None = Field(
        default=None,
        description="自定义停止条件 (page, items, page_number) -> bool，可为协程",
    )


class ScrollOptions(BaseModel):
    """无限滚动的滚动行为"""

    scroll_distance: int | float | str | None = Field(
        default=None, description="每次滚动距离：像素值或视口百分比（如 '80%'）"
    )
    scroll_to_bottom: bool = Field(default=True, description="是否直接滚动到底部")
    scroll_container: str | None = Field(default=None, description="滚动容器选择器，默认窗口")
    scroll_delay: int | None = Field(default=None, ge=0, description="滚动后的稳定等待（毫秒）")
    max_scrolls: int | None = Field(
        default=None, ge=0, description="连续无新条目时允许的最大滚动次数"
    )

    @field_validator("scroll_distance")
    @classmethod
    def check_distance(cls, value):
        if value is not None:
            try:
                parse_scroll_distance(value)
            except ConfigValidationError as e:
                raise ValueError(str(e)) from e
        return value


class InfiniteScrollConfig(BasePaginationConfig):
    type: Literal["infinite-scroll"] = "infinite-scroll"
    scroll_options: ScrollOptions = Field(default_factory=ScrollOptions)
    loading_selector: str | None = Field(default=None, description="加载中指示器")
    end_of_content_selector: str | None = Field(default=None, description="内容结束标记")


class LoadMoreButtonConfig(BasePaginationConfig):
    type: Literal["load-more-button"] = "load-more-button"
    button_selector: str = Field(..., description="加载更多按钮选择器")
    alternative_selectors: list[str] = Field(default_factory=list, description="备选选择器")
    wait_after_click: int | None = Field(default=None, ge=0, description="点击后等待（毫秒）")
    wait_for_selector: str | None = Field(default=None, description="点击后等待出现的选择器")


class NumberedPaginationConfig(BasePaginationConfig):
    type: Literal["numbered-pagination"] = "numbered-pagination"
    next_button_selector: str | None = Field(default=None, description="下一页按钮选择器")
    page_number_selector: str | None = Field(default=None, description="页码链接选择器")
    current_page_selector: str | None = Field(default=None, description="当前页指示器")
    use_direct_page_links: bool = Field(default=False, description="直接跳转页码而非点击下一页")
    page_url_pattern: str | None = Field(
        default=None, description="页码 URL 模板，{page} 为从 1 开始的页码"
    )

    @field_validator("page_url_pattern")
    @classmethod
    def check_pattern(cls, value):
        if value is not None:
            try:
                validate_page_url_pattern(value)
            except ConfigValidationError as e:
                raise ValueError(str(e)) from e
        return value

    @model_validator(mode="after")
    def check_navigation(self):
        if self.use_direct_page_links:
            if not (self.page_url_pattern or self.page_number_selector):
                raise ValueError("直接页码跳转需要 page_url_pattern 或 page_number_selector")
        elif not self.next_button_selector:
            raise ValueError("需要 next_button_selector")
        return self


class CursorBasedConfig(BasePaginationConfig):
    type: Literal["cursor-based"] = "cursor-based"
    extract_cursor: Callable[..., Any] = Field(
        ..., description="(page, items) -> cursor | None，可为协程"
    )
    navigate_with_cursor: Callable[..., Any] = Field(
        ..., description="(page, cursor) -> None，可为协程"
    )
    initial_cursor: Any = Field(default=None, description="初始游标（不透明值，None 表示无）")


class DateRange(BaseModel):
    start: datetime
    end: datetime
    interval: Literal["day", "week", "month"] = "day"


class TimeBasedConfig(BasePaginationConfig):
    type: Literal["time-based"] = "time-based"
    date_range: DateRange | None = None
    extract_timestamp: Callable[..., Any] = Field(..., description="(item) -> datetime | None")
    navigate_to_time_period: Callable[..., Any] = Field(
        ..., description="(page, start, end) -> None，可为协程"
    )


class HybridConfig(BasePaginationConfig):
    type: Literal["hybrid"] = "hybrid"
    primary_strategy: PaginationOptions
    fallback_strategy: PaginationOptions
    # 已声明但分发逻辑不会调用：主策略抛出任何异常都会切换到备用策略
    switch_condition: Callable[..., Any] | None = None


PaginationOptions = Annotated[
    Union[
        InfiniteScrollConfig,
        LoadMoreButtonConfig,
        NumberedPaginationConfig,
        CursorBasedConfig,
        TimeBasedConfig,
        HybridConfig,
    ],
    Field(discriminator="type"),
]

HybridConfig.model_rebuild()


# ============================================================================
# 运行状态与结果
# ============================================================================


@dataclass
class PaginationState:
    """单次运行的可变状态，仅由控制器持有"""

    current_page: int = 0
    total_items: int = 0
    errors: list[str] = field(default_factory=list)
    start_time: float = field(default_factory=now_ms)
    last_cursor: Any = None
    last_timestamp: datetime | None = None
    is_loading: bool = False


@dataclass(frozen=True)
class PaginationMetadata:
    start_time: float
    end_time: float
    average_page_time: float
    last_cursor: Any = None
    last_timestamp: datetime | None = None


@dataclass(frozen=True)
class PaginationResult(Generic[T]):
    """分页运行结果，返回后归调用方所有"""

    items: list[T]
    pages_processed: int
    total_time: float  # 毫秒
    completed: bool
    stop_reason: StopReason
    errors: list[str]
    metadata: PaginationMetadata


# ============================================================================
# 事件与调用选项
# ============================================================================


@dataclass
class PaginationEventHandlers:
    """生命周期回调，普通函数或协程均可"""

    on_page_start: Callable[[int, PaginationState], Any] | None = None
    on_page_complete: Callable[[int, list, PaginationState], Any] | None = None
    on_items_extracted: Callable[[list, int, PaginationState], Any] | None = None
    on_error: Callable[[str, int, PaginationState], Any] | None = None
    on_complete: Callable[[PaginationResult], Any] | None = None


class PaginatedExtractionOptions(BaseModel):
    """分页提取调用选项"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    pagination: PaginationOptions
    extract_items: Callable[..., Any] = Field(..., description="(page, html) -> list[T]，可为协程")
    is_duplicate: Callable[..., bool] | None = Field(
        default=None, description="(item, existing_items) -> bool，可为协程"
    )
    include_duplicates: bool = False
    event_handlers: PaginationEventHandlers | None = None
