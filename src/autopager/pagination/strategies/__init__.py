"""分页策略执行器"""

from .base import PaginationExecutor
from .cursor import CursorBasedExecutor
from .hybrid import HybridExecutor, inherit_limits
from .infinite_scroll import InfiniteScrollExecutor
from .load_more import LoadMoreButtonExecutor
from .numbered import NumberedPaginationExecutor
from .registry import create_executor
from .time_based import TimeBasedExecutor

__all__ = [
    "PaginationExecutor",
    "CursorBasedExecutor",
    "HybridExecutor",
    "InfiniteScrollExecutor",
    "LoadMoreButtonExecutor",
    "NumberedPaginationExecutor",
    "TimeBasedExecutor",
    "create_executor",
    "inherit_limits",
]
