"""分页提取引擎"""

from .controller import PaginationController
from .models import (
    BasePaginationConfig,
    CursorBasedConfig,
    DateRange,
    HybridConfig,
    InfiniteScrollConfig,
    LoadMoreButtonConfig,
    NumberedPaginationConfig,
    PaginatedExtractionOptions,
    PaginationEventHandlers,
    PaginationMetadata,
    PaginationOptions,
    PaginationResult,
    PaginationState,
    PaginationType,
    ScrollOptions,
    StopReason,
    TimeBasedConfig,
)

__all__ = [
    "PaginationController",
    "BasePaginationConfig",
    "CursorBasedConfig",
    "DateRange",
    "HybridConfig",
    "InfiniteScrollConfig",
    "LoadMoreButtonConfig",
    "NumberedPaginationConfig",
    "PaginatedExtractionOptions",
    "PaginationEventHandlers",
    "PaginationMetadata",
    "PaginationOptions",
    "PaginationResult",
    "PaginationState",
    "PaginationType",
    "ScrollOptions",
    "StopReason",
    "TimeBasedConfig",
]
