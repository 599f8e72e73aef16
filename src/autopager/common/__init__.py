"""Common模块 - 公共工具和基础设施

该模块提供：
- 全局配置管理
- 日志系统
- 异常类
- 常量定义
- 输入验证
"""

from .config import config, Config
from .logger import get_logger, console
from .exceptions import (
    AutoPagerError,
    BrowserError,
    PageLoadError,
    ValidationError,
    URLValidationError,
    ConfigError,
    PaginationError,
    ExtractionError,
)
from .constants import (
    DEFAULT_SCROLL_PIXELS,
    DEFAULT_WAIT_UNTIL,
    PAGE_NUMBER_PLACEHOLDER,
)
from .validators import validate_url

__all__ = [
    "config",
    "Config",
    "get_logger",
    "console",
    "AutoPagerError",
    "BrowserError",
    "PageLoadError",
    "ValidationError",
    "URLValidationError",
    "ConfigError",
    "PaginationError",
    "ExtractionError",
    "DEFAULT_SCROLL_PIXELS",
    "DEFAULT_WAIT_UNTIL",
    "PAGE_NUMBER_PLACEHOLDER",
    "validate_url",
]
