"""按配置类型分发到对应的执行器"""

from __future__ import annotations

from ...common.config import PaginationDefaults
from ...common.exceptions import UnsupportedStrategyError
from ..models import (
    CursorBasedConfig,
    HybridConfig,
    InfiniteScrollConfig,
    LoadMoreButtonConfig,
    NumberedPaginationConfig,
    TimeBasedConfig,
)
from .base import PaginationExecutor
from .cursor import CursorBasedExecutor
from .hybrid import HybridExecutor
from .infinite_scroll import InfiniteScrollExecutor
from .load_more import LoadMoreButtonExecutor
from .numbered import NumberedPaginationExecutor
from .time_based import TimeBasedExecutor


def create_executor(config, defaults: PaginationDefaults | None = None) -> PaginationExecutor:
    """根据分页配置创建执行器

    Raises:
        UnsupportedStrategyError: 未知的配置类型
    """
    match config:
        case InfiniteScrollConfig():
            return InfiniteScrollExecutor(config, defaults)
        case LoadMoreButtonConfig():
            return LoadMoreButtonExecutor(config, defaults)
        case NumberedPaginationConfig():
            return NumberedPaginationExecutor(config, defaults)
        case CursorBasedConfig():
            return CursorBasedExecutor(config, defaults)
        case TimeBasedConfig():
            return TimeBasedExecutor(config, defaults)
        case HybridConfig():
            return HybridExecutor(config, defaults)
        case _:
            raise UnsupportedStrategyError(str(getattr(config, "type", type(config).__name__)))
