"""自定义异常类

定义项目中使用的所有自定义异常，用于更精细的错误处理。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..pagination.models import PaginationResult


class AutoPagerError(Exception):
    """AutoPager 基础异常类

    所有自定义异常的基类。
    """
    pass


class BrowserError(AutoPagerError):
    """浏览器相关错误的基类"""
    pass


class PageLoadError(BrowserError):
    """页面加载失败

    文档打开失败时抛出。分页运行中抛出时，result 携带一个
    completed=False、stop_reason=error 的结果，供调用方检查。
    """
    def __init__(
        self,
        url: str,
        message: str = "页面加载失败",
        result: "PaginationResult[Any] | None" = None,
    ):
        super().__init__(f"{message}: {url}")
        self.url = url
        self.result = result


class ElementNotFoundError(BrowserError):
    """元素未找到错误"""
    def __init__(self, selector: str, message: str = "元素未找到"):
        super().__init__(f"{message}: {selector}")
        self.selector = selector


class ValidationError(AutoPagerError):
    """验证失败错误"""
    pass


class URLValidationError(ValidationError):
    """URL 验证失败"""
    def __init__(self, url: str, reason: str = "格式无效"):
        super().__init__(f"URL 验证失败: {url}, 原因: {reason}")
        self.url = url
        self.reason = reason


class ConfigError(AutoPagerError):
    """配置相关错误"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证失败"""
    pass


class PaginationError(AutoPagerError):
    """分页处理错误"""
    pass


class StrategyNotImplementedError(PaginationError, NotImplementedError):
    """分页策略已声明但尚未实现"""
    def __init__(self, strategy: str):
        super().__init__(f"分页策略尚未实现: {strategy}")
        self.strategy = strategy


class UnsupportedStrategyError(PaginationError):
    """未知的分页策略"""
    def __init__(self, strategy: str):
        super().__init__(f"不支持的分页策略: {strategy}")
        self.strategy = strategy


class ExtractionError(AutoPagerError):
    """结构化提取错误的基类"""
    pass


class FieldExtractionError(ExtractionError):
    """单个字段提取失败"""
    def __init__(self, field_name: str, message: str):
        super().__init__(f"字段 '{field_name}' 提取失败: {message}")
        self.field_name = field_name


class TransformError(ExtractionError):
    """转换器定义无效"""
    pass
