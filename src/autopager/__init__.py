"""AutoPager - 基于 Playwright 的浏览器渲染与分页提取"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .parser import BrowserParser as BrowserParser
    from .pagination.controller import PaginationController as PaginationController

__all__ = [
    "__version__",
    "BrowserParser",
    "PaginationController",
]


def __getattr__(name: str) -> Any:
    """Lazy exports to avoid importing Playwright at package import time."""
    if name == "BrowserParser":
        from .parser import BrowserParser

        return BrowserParser
    if name == "PaginationController":
        from .pagination.controller import PaginationController

        return PaginationController
    raise AttributeError(f"module 'autopager' has no attribute '{name}'")
