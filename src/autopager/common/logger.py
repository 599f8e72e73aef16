"""统一日志系统

所有日志器都挂在 ``autopager`` 根日志器下，由根日志器统一持有
Rich 控制台输出（以及可选的文件输出）。浏览器引擎使用 loguru 单独输出。
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "autopager"

# 全局控制台实例
console = Console()

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


def get_log_level() -> int:
    """从环境变量 LOG_LEVEL 读取日志级别，无法识别时使用 INFO"""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return root

    root.setLevel(get_log_level())
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=os.getenv("LOG_SHOW_LOCALS", "false").lower() == "true",
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """获取日志器

    Args:
        name: 日志器名称，通常使用 __name__；不在 autopager 命名空间下的名称会被挂到其下

    Example:
        >>> from autopager.common.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("开始分页")
    """
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_file_logging(log_file: str, level: int = logging.DEBUG) -> logging.Handler:
    """为 autopager 根日志器追加文件输出，返回新建的处理器"""
    root = _configure_root()
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    if root.level > level:
        root.setLevel(level)
        for existing in root.handlers:
            if isinstance(existing, RichHandler):
                existing.setLevel(get_log_level())
    return handler


def verbose_level(verbose: bool) -> int:
    """verbose 模式下把逐轮诊断日志提升到 INFO"""
    return logging.INFO if verbose else logging.DEBUG


def get_pagination_logger() -> logging.Logger:
    return get_logger("autopager.pagination")


def get_extraction_logger() -> logging.Logger:
    return get_logger("autopager.extraction")
