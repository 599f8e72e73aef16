"""通用工具模块"""

from .delay import maybe_await, sleep_ms

__all__ = [
    "maybe_await",
    "sleep_ms",
]
